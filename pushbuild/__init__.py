import logging

from pushbuild.config import config

logging.basicConfig(
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s',
    level=logging.INFO,
)
if config.debug:
    logging.getLogger('pushbuild.runner').setLevel(logging.DEBUG)
    logging.getLogger('pushbuild.runtime').setLevel(logging.DEBUG)
    logging.getLogger('pushbuild.utils').setLevel(logging.DEBUG)
    logging.getLogger('pushbuild.web').setLevel(logging.DEBUG)
