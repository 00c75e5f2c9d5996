import logging
import sys

import uvicorn

from pushbuild.config import config
from pushbuild.utils import inherited_listen_fd
from pushbuild.web import app

logger = logging.getLogger('pushbuild')

if len(sys.argv) != 2 or sys.argv[1] != 'server':
    sys.exit(f'Usage: {sys.executable} -m pushbuild server')

if (fd := inherited_listen_fd()) is not None:
    logger.info(f'Serving on inherited socket {fd}')
    uvicorn.run(app, fd=fd)
else:
    uvicorn.run(app, host=config.host, port=config.port)
