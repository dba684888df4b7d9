import xml.etree.ElementTree as ET
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from extension_testkit.interfaces.extensions.v1.base import ExtensionDependency
from extension_testkit.interfaces.extensions.v1.base import ExtensionDescriptor
from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.interfaces.extensions.v1.base import ExtensionRepository
from extension_testkit.interfaces.extensions.v1.base import RepositoryDescriptor
from extension_testkit.interfaces.extensions.v1.errors import ExtensionNotFoundError
from extension_testkit.interfaces.extensions.v1.errors import InvalidExtensionDescriptorError

POM_NAMESPACE = "{http://maven.apache.org/POM/4.0.0}"


class MavenExtensionRepository(ExtensionRepository):
    """
    Read-only view over a Maven-style directory layout:

        <root>/<group path>/<artifactId>/<version>/<artifactId>-<version>.pom

    Extension ids are `groupId:artifactId`. Only the POM metadata is used.
    """

    def __init__(self, descriptor: RepositoryDescriptor) -> None:
        self._descriptor = descriptor
        self.root = location_to_path(descriptor.location)

    @property
    def descriptor(self) -> RepositoryDescriptor:
        return self._descriptor

    def get_extension_ids(self) -> tuple[ExtensionId, ...]:
        if not self.root.is_dir():
            return ()
        extension_ids = []
        for pom_path in sorted(self.root.rglob("*.pom")):
            version_folder = pom_path.parent
            artifact_folder = version_folder.parent
            if pom_path.name != f"{artifact_folder.name}-{version_folder.name}.pom":
                continue
            group_parts = artifact_folder.parent.relative_to(self.root).parts
            if not group_parts:
                continue
            group_id = ".".join(group_parts)
            extension_ids.append(ExtensionId(id=f"{group_id}:{artifact_folder.name}", version=version_folder.name))
        return tuple(extension_ids)

    def resolve(self, extension_id: ExtensionId) -> ExtensionDescriptor:
        pom_path = self._get_pom_path(extension_id)
        if pom_path is None or not pom_path.is_file():
            raise ExtensionNotFoundError(f"Extension {extension_id} not found in repository {self.descriptor.id}")
        return parse_pom(pom_path, extension_id)

    def _get_pom_path(self, extension_id: ExtensionId) -> Path | None:
        group_id, separator, artifact_id = extension_id.id.partition(":")
        if not separator or not group_id or not artifact_id:
            return None
        return (
            self.root.joinpath(*group_id.split("."))
            / artifact_id
            / extension_id.version
            / f"{artifact_id}-{extension_id.version}.pom"
        )


def location_to_path(location: str) -> Path:
    parsed = urlparse(location)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    return Path(location)


def parse_pom(pom_path: Path, extension_id: ExtensionId) -> ExtensionDescriptor:
    try:
        project = ET.parse(pom_path).getroot()
    except ET.ParseError as e:
        raise InvalidExtensionDescriptorError(f"Invalid POM at {pom_path}") from e

    # POMs may or may not declare the default namespace
    namespace = POM_NAMESPACE if project.tag.startswith(POM_NAMESPACE) else ""

    def text(element: ET.Element, tag: str) -> str | None:
        child = element.find(f"{namespace}{tag}")
        return child.text.strip() if child is not None and child.text else None

    dependencies = []
    for dependency in project.iterfind(f"{namespace}dependencies/{namespace}dependency"):
        group_id = text(dependency, "groupId")
        artifact_id = text(dependency, "artifactId")
        if group_id is None or artifact_id is None:
            raise InvalidExtensionDescriptorError(f"Dependency without groupId/artifactId in {pom_path}")
        dependencies.append(
            ExtensionDependency(id=f"{group_id}:{artifact_id}", version_constraint=text(dependency, "version"))
        )

    return ExtensionDescriptor(
        id=extension_id.id,
        version=extension_id.version,
        type=text(project, "packaging") or "jar",
        name=text(project, "name"),
        summary=text(project, "description"),
        dependencies=tuple(dependencies),
    )
