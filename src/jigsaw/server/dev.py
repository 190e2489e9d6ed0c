"""Development server.

Starts a pounce ASGI server with the live jigsaw Engine object.
Single worker; template and component reloads come from the engine's own
change feed rather than from a process restart.
"""


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for the given ASGI callable.

    Pounce's ``run()`` takes an import string (e.g., ``"site:engine"``),
    but the engine is already a live object, so ``pounce.Server`` is used
    directly.

    Args:
        app: ASGI callable (jigsaw Engine instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart the process when Python sources change.
        app_path: Optional ``"module:attribute"`` import string, needed by
            pounce to reimport the engine after a reload.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
