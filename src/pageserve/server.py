"""aiohttp server for pageserve.

Application factory, the catch-all file handler, and the HTTPS startup routine.
"""

import logging

from aiohttp import web
from yarl import URL

from pageserve.app_keys import resolver_key, root_dir_key
from pageserve.config import Config
from pageserve.core.resolver import PathResolver, clean_path, contains_dot_dot
from pageserve.tls import create_ssl_context

logger = logging.getLogger(__name__)


async def serve_files(request: web.Request) -> web.StreamResponse:
    """Serve the file a request path resolves to.

    Every method and every path lands here. A path that is not in canonical
    form is redirected to its cleaned form first, so repeated slashes never
    reach the resolver. Existence, content type and streaming are left to
    FileResponse; a path with no regular file behind it is a 404.
    """
    url_path = request.path
    logger.info(f"Request: {url_path}")

    cleaned = clean_path(url_path)
    if cleaned != url_path:
        location = URL.build(path=cleaned, query_string=request.query_string)
        raise web.HTTPMovedPermanently(location=location)

    if contains_dot_dot(url_path):
        raise web.HTTPBadRequest(text="invalid URL path")

    file_path = request.app[resolver_key].resolve(url_path)
    logger.info(f"Serving: {file_path}")

    full_path = request.app[root_dir_key] / file_path
    if not full_path.is_file():
        raise web.HTTPNotFound()
    return web.FileResponse(full_path)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    app[resolver_key] = PathResolver.from_config(config.files)
    app[root_dir_key] = config.files.root_dir

    app.router.add_route("*", "/{path:.*}", serve_files)

    return app


def run_server(config: Config) -> None:
    """Run the HTTPS server until the process is stopped.

    The TLS material is loaded before anything is bound, so a bad
    certificate or key never leaves a listener behind.

    Args:
        config: Application configuration

    Raises:
        TLSConfigError: If the certificate or key cannot be loaded
        OSError: If the listener cannot be bound
    """
    ssl_context = create_ssl_context(config.server.cert_file, config.server.key_file)
    app = create_app(config)

    logger.info(f"Listening on {config.server.host}:{config.server.port}...")
    web.run_app(
        app,
        host=config.server.host,
        port=config.server.port,
        ssl_context=ssl_context,
    )
