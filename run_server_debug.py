"""Run the API with uvicorn in reload mode for local debugging."""

import os
import socket
import sys

from dotenv import load_dotenv

load_dotenv()


def is_port_in_use(port):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(('localhost', port)) == 0


if __name__ == "__main__":
    port = int(os.getenv("API_PORT", "8000"))

    if is_port_in_use(port):
        print(f"Port {port} is already in use.")
        print("Stop the process using it or change API_PORT in .env")
        sys.exit(1)

    print("=" * 80)
    print(f"Starting debug server: http://0.0.0.0:{port}")
    print("=" * 80)

    import uvicorn

    project_root = os.path.dirname(os.path.abspath(__file__))
    src_dir = os.path.join(project_root, "src")

    log_level = os.getenv("UVICORN_LOG_LEVEL", "info")
    try:
        uvicorn.run(
            "src.api.main:app",
            host="0.0.0.0",
            port=port,
            log_level=log_level,
            access_log=True,
            use_colors=True,
            reload=True,
            reload_dirs=[src_dir],
        )
    except KeyboardInterrupt:
        print("\nServer stopped")
