from pydantic import BaseModel
from pydantic import ConfigDict


class Service(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    def start(self) -> None:
        """
        Start the service and prepare it for use.

        Will be called when the component registry first hands the service out.
        """

    def stop(self) -> None:
        """
        Close the service and release any resources it holds.
        """
