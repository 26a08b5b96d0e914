"""Website setup page (not built yet)."""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

from src.ui.components.coming_soon import render_coming_soon  # noqa: E402
from src.ui.flow import Route  # noqa: E402

render_coming_soon(Route.website)
