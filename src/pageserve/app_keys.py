"""Application keys for type-safe app configuration access."""

from pathlib import Path

from aiohttp import web

from pageserve.core.resolver import PathResolver

resolver_key = web.AppKey("resolver", PathResolver)
root_dir_key = web.AppKey("root_dir", Path)
