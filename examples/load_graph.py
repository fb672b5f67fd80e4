"""Record the system load average and render it as a PNG.

Requires the rrdtool extra: ``pip install rrdbridge[rrdtool]``.
Run for a few minutes, then open ``load.png``.
"""

import logging
import os
import time
from datetime import datetime, timedelta

from rrdbridge import CF, NOW, UNKNOWN, Creator, DSType, Grapher, Updater
from rrdbridge.adapters.engine.rrdtool import RRDToolEngine

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

RRD_FILE = "load.rrd"
STEP = 10


def create_database(engine: RRDToolEngine) -> None:
    """Create the database unless it already exists."""
    creator = Creator(engine, RRD_FILE, datetime.now() - timedelta(seconds=STEP), STEP)
    creator.data_source("load1", DSType.GAUGE, 2 * STEP, 0, UNKNOWN)
    creator.data_source("load5", DSType.GAUGE, 2 * STEP, 0, UNKNOWN)
    creator.archive(CF.AVERAGE, 0.5, 1, 360)
    creator.archive(CF.MAX, 0.5, 6, 1440)
    try:
        creator.create()
    except FileExistsError:
        logger.info("Reusing %s", RRD_FILE)


def render(engine: RRDToolEngine) -> None:
    g = Grapher(engine)
    g.set_title("Load average")
    g.set_vlabel("processes")
    g.set_size(600, 200)
    g.set_limits(lower=0)
    g.define("l1", RRD_FILE, "load1", CF.AVERAGE)
    g.define("l5", RRD_FILE, "load5", CF.AVERAGE)
    g.vdef("peak", "l1,MAXIMUM")
    g.area("l1", "99CCFF", "1 min")
    g.line(2, "l5", "0000FF", "5 min")
    g.gprint("peak", "peak %5.2lf")
    g.gprint_with_time("peak", "at %H\\:%M")
    g.print("peak", "%5.2lf")
    end = datetime.now()
    info = g.save_graph("load.png", end - timedelta(hours=1), end)
    logger.info("Rendered %dx%d, peak %s", info.width, info.height, info.print_lines)


def main() -> None:
    engine = RRDToolEngine()
    create_database(engine)
    updater = Updater(engine, RRD_FILE)
    load1, load5, _ = os.getloadavg()
    updater.update(NOW, load1, load5)
    for _ in range(6):
        time.sleep(STEP)
        load1, load5, _ = os.getloadavg()
        updater.cache(datetime.now(), load1, load5)
    updater.update()
    render(engine)


if __name__ == "__main__":
    main()
