import os
import pathlib
import sys


def ensure_settings() -> None:
    """Seed a placeholder API key so the import does not depend on the caller's env."""
    os.environ.setdefault("CS_OPENAI_API_KEY", "sk-placeholder")


def ensure_project_path() -> None:
    """Make sure the project root is on sys.path for local module imports."""
    project_root = pathlib.Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


if __name__ == "__main__":
    ensure_settings()
    ensure_project_path()

    from content_studio.main import app  # noqa: E402

    api_routes = sorted(route.path for route in app.routes if route.path.startswith("/api"))
    print("FastAPI app imported successfully with", len(app.routes), "routes.")
    for path in api_routes:
        print("  ", path)
