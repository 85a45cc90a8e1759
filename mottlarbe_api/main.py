"""FastAPI ASGI app bootstrap.

``python main.py`` is the supported way to run the server: it configures
logging and announces the bound URL. Serving this module-level ``app`` with
the ``uvicorn`` CLI skips both.
"""

from mottlarbe_api.bootstrap import create_app

app = create_app()
