"""Resources bundled with the testkit, addressed through importlib.resources."""
