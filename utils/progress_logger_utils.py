# MIT License
#
# Copyright (c) 2018 Evgeny Medvedev, evge.medvedev@gmail.com
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
# Modified By: Cuong CT, 6/12/2025
# Change Description: Progress reporting for asyncio fan-outs by percentage or item step.

from datetime import datetime
from typing import Optional

from utils.logger_utils import get_logger


# Plain counter; safe under asyncio because there is no await inside increment.
class AtomicCounter:
    def __init__(self):
        self._value = 0

    def increment(self, increment: int = 1) -> int:
        assert increment > 0
        self._value += increment
        return self._value

    @property
    def value(self) -> int:
        return self._value


class ProgressLogger:
    """
    Logs how far a fan-out has progressed, every `log_percentage_step` percent
    when the total is known, every `log_item_step` items otherwise.
    """

    def __init__(
        self,
        name: str = "work",
        logger=None,
        log_percentage_step: int = 25,
        log_item_step: int = 1000,
    ):
        self.name = name
        self.total_items: Optional[int] = None
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.counter = AtomicCounter()
        self.log_percentage_step = log_percentage_step
        self.log_item_step = log_item_step
        self.logger = logger if logger is not None else get_logger("Progress Logger")

    def start(self, total_items: Optional[int] = None):
        self.total_items = total_items
        self.start_time = datetime.now()
        message = f"Started {self.name}."
        if total_items is not None:
            message += f" Items to process: {total_items}."
        self.logger.debug(message)

    def track(self, item_count: int = 1):
        processed = self.counter.increment(item_count)
        processed_before = processed - item_count

        message = None
        if not self.total_items:
            if processed_before // self.log_item_step != processed // self.log_item_step:
                message = f"{self.name}: {processed} items processed."
        else:
            percentage = processed * 100 // self.total_items
            percentage_before = processed_before * 100 // self.total_items
            if percentage_before // self.log_percentage_step != percentage // self.log_percentage_step:
                message = f"{self.name}: {processed}/{self.total_items} items processed ({percentage}%)."

        if message is not None:
            self.logger.info(message)

    def finish(self):
        duration = None
        if self.start_time is not None:
            self.end_time = datetime.now()
            duration = self.end_time - self.start_time

        message = f"Finished {self.name}. Items processed: {self.counter.value}."
        if duration is not None:
            message += f" Took {duration}."
        self.logger.debug(message)
