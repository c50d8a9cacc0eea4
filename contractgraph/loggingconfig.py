"""
Setup python logging system- log to a file in the current working directory
and also log to console stdout and stderr.
"""

import os
import logging

from contractgraph.config import LOG_FILENAME

logger = logging.getLogger("contractgraph")
logger.setLevel(logging.DEBUG)

ch = logging.StreamHandler()
ch.setLevel(logging.INFO)

# delay=True so that merely importing the library does not create the file
fh = logging.FileHandler(os.path.join(os.getcwd(), LOG_FILENAME), delay=True)
fh.setLevel(logging.DEBUG)

formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

ch.setFormatter(formatter)
fh.setFormatter(formatter)

logger.addHandler(ch)
logger.addHandler(fh)
