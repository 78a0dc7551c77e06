import os
import sys
from datetime import datetime

# Package lives under src/ and has no __init__.py
sys.path.insert(0, os.path.abspath("../src"))

project = "aux-alignment"
author = "Paweł T. Jochym"
copyright = f"{datetime.now().year}, {author}"
release = "1.0.0"
version = ".".join(release.split(".")[:2])

root_doc = "index"
source_suffix = {".md": "markdown", ".rst": "restructuredtext"}
exclude_patterns = ["_build", "venv"]

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.intersphinx",
    "myst_parser",
    "sphinx_copybutton",
]

# Docstrings use Google style sections (Attributes:, Description:)
napoleon_google_docstring = True
napoleon_numpy_docstring = False
autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "undoc-members": False,
    "show-inheritance": True,
}

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
    "scipy": ("https://docs.scipy.org/doc/scipy/", None),
    "ephem": ("https://rhodesmill.org/pyephem/", None),
}

myst_enable_extensions = ["colon_fence", "deflist"]

html_theme = "furo"
html_title = f"Mount Alignment Engine {release}"
copybutton_prompt_text = "$ "
