"""Point d'entrée: python -m gst_invoice"""

import sys

import uvicorn

from gst_invoice.config import ConfigurationError, get_settings


def main() -> None:
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc
    uvicorn.run("gst_invoice.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
