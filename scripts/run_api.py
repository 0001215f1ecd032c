"""
Serve the benefit pricing API with uvicorn.

Usage:
    python scripts/run_api.py
    python scripts/run_api.py --port 9000 --no-reload
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

# Add src to path
PROJECT_ROOT = Path(__file__).parent.parent
SRC_PATH = PROJECT_ROOT / 'src'
sys.path.insert(0, str(SRC_PATH))

from benefit_pricing.config.settings import get_settings

APP = "benefit_pricing.api.main:app"


def uvicorn_command(host: str, port: int, reload: bool = True, log_level: str = "INFO") -> list[str]:
    """Command line that starts uvicorn on the pricing app."""
    command = [
        sys.executable, "-m", "uvicorn", APP,
        "--host", host,
        "--port", str(port),
        "--log-level", log_level.lower(),
    ]
    if reload:
        command.append("--reload")
    return command


def main(argv=None):
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the benefit pricing API")
    parser.add_argument("--host", default=settings.api_host)
    parser.add_argument("--port", type=int, default=settings.api_port)
    parser.add_argument("--no-reload", action="store_true", help="disable auto-reload")
    args = parser.parse_args(argv)

    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_PATH), env.get("PYTHONPATH")]))

    command = uvicorn_command(args.host, args.port, not args.no_reload, settings.log_level)
    print(f"Serving {APP} on http://{args.host}:{args.port}")
    try:
        return subprocess.run(command, cwd=PROJECT_ROOT, env=env).returncode
    except KeyboardInterrupt:
        print("\nAPI stopped.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
