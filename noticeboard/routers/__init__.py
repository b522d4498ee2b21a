"""
FastAPI routers grouped by domain (auth, announcements).

Each module exposes an APIRouter included by `noticeboard.app.create_app`.
"""
