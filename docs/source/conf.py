# pylint: disable-all
import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath('../..'))

extensions = [
    'sphinx.ext.autodoc', 'sphinx.ext.mathjax', 'sphinx.ext.intersphinx',
    'sphinx.ext.viewcode', 'sphinx.ext.napoleon', 'sphinx.ext.doctest',
    'sphinx.ext.todo'
]

# General information about the project.
project = 'griddist'
copyright = '{}, griddist developers'.format(datetime.now().year)
author = 'griddist developers'
master_doc = 'index'
pygments_style = 'sphinx'
todo_include_todos = True
add_module_names = False

html_theme = 'alabaster'

autodoc_default_options = {'members': True, 'undoc-members': True}
autodoc_member_order = "bysource"
autodoc_typehints_format = 'short'
autodoc_type_aliases = {'Operand': 'Union[float, Distribution]',
                        'ArrayLike': 'Union[Sequence[float], numpy.ndarray]'}

doctest_global_setup = 'from griddist.util import *'

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'numpy': ('https://numpy.org/doc/stable/', None),
    'matplotlib': ('https://matplotlib.org/stable/', None),
}
