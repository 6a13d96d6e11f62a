import sys
import os

# autodoc imports the package from the repository root
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

project = 'Votetally'
copyright = '2026, Votetally developers'
author = 'Votetally developers'

extensions = [
    'sphinx.ext.autodoc',
    'recommonmark',
]

source_suffix = {
    '.rst': 'restructuredtext',
    '.md': 'markdown',
}

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

html_theme = 'sphinxdoc'
