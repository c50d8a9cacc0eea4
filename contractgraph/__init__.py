from contractgraph.__version__ import __version__
