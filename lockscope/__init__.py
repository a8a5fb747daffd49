from lockscope.__version__ import __version__
