"""API package.

This exposes router modules to simplify test imports like:
	from tablemate.api.routes.reviews import router
"""

__all__ = [
	"routes",
]
