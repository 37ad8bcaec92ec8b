from __future__ import annotations

from paginator.main import run

if __name__ == "__main__":
    run()
