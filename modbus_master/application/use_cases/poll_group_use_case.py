"""PollGroupUseCase: one poll of one group.

This use case runs the read -> convert -> diff -> emit pipeline for a
single due group:
1. Merge the due definitions into wire reads
2. Await each read sequentially (half-duplex links allow one at a time)
3. Slice, convert and scale the words per definition
4. Compare change-detecting registers against their last known value
5. Emit ValueChanged events immediately and one Readings event at the end

A failed read never aborts the group: its members get erroring readings
and an Error event is emitted, then the next read proceeds.
"""

import inspect
import logging
import time
from typing import Optional, Sequence

from ...domain.entities import OptimizedRead, PollGroup, RegisterDefinition, RegisterReading
from ...domain.interfaces import IEventSink, ReadFunction
from ...domain.services import ChangeDetector, ReadOptimizer
from ...domain.value_objects import ErrorEvent, ReadingsEvent, ValueChangedEvent
from ..services.reading_store import LastReadingStore
from .poll_group_result import PollGroupResult

_LOGGER = logging.getLogger(__name__)


class PollGroupUseCase:
    """Use case for polling one group.

    Dependencies (injected):
    - store: Last-known readings, read for change detection and updated
      once all reads of the group have finished
    - event_sink: Receives ValueChanged, Error and Readings events
    - change_detector: Float tolerance / exact comparison rules
    - optimizer: Merges definitions into wire reads

    Example:
        >>> use_case = PollGroupUseCase(store, sink)
        >>> result = await use_case.execute(group, reader)
        >>> if result.success:
        ...     print(f"Read {len(result.readings)} registers in {result.duration:.2f}s")
    """

    def __init__(
        self,
        store: LastReadingStore,
        event_sink: IEventSink,
        change_detector: Optional[ChangeDetector] = None,
        optimizer: Optional[ReadOptimizer] = None,
    ):
        self._store = store
        self._event_sink = event_sink
        self._change_detector = change_detector or ChangeDetector()
        self._optimizer = optimizer or ReadOptimizer()

    async def execute(
        self,
        group: PollGroup,
        read_fn: ReadFunction,
        definitions: Optional[Sequence[RegisterDefinition]] = None,
    ) -> PollGroupResult:
        """Poll a group once.

        Args:
            group: Group to poll (a snapshot; it is not modified)
            read_fn: Async ``read(slave_id, register_type, start, count)``
            definitions: Subset of the group's definitions that are due
                (default: all of them)

        Returns:
            PollGroupResult with one reading per polled definition
        """
        start_time = time.monotonic()
        result = PollGroupResult(group=group.name)
        due = list(group.registers if definitions is None else definitions)

        for read in self._optimizer.optimize(due):
            try:
                values = read_fn(
                    group.slave_id, read.register_type, read.start_address, read.count
                )
                if inspect.isawaitable(values):
                    values = await values
                values = list(values)
            except Exception as err:  # any read_fn failure is reported, not raised
                self._fail_read(group, read, str(err) or type(err).__name__, result)
                continue

            if len(values) != read.count:
                self._fail_read(
                    group,
                    read,
                    f"Expected {read.count} values, got {len(values)}",
                    result,
                )
                continue

            for definition in read.registers:
                result.readings.append(
                    self._convert(definition, read.slice_for(definition, values), result)
                )

        self._store.update(result.readings)
        if result.readings:
            self._event_sink.publish(
                ReadingsEvent(group=group.name, readings=tuple(result.readings))
            )

        result.duration = time.monotonic() - start_time
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Polled group %s: %d readings, %d failed reads, %d changed in %.3fs",
                group.name,
                len(result.readings),
                result.errors,
                len(result.changed),
                result.duration,
            )
        return result

    def _convert(
        self,
        definition: RegisterDefinition,
        words: Sequence[int],
        result: PollGroupResult,
    ) -> RegisterReading:
        value = definition.data_type.convert(words)
        if value is None:
            return RegisterReading.failed(
                definition,
                f"Expected {definition.count} registers, got {len(words)}",
            )

        reading = RegisterReading(
            definition=definition,
            raw_values=list(words),
            value=value,
            scaled_value=definition.apply_scaling(value),
        )

        if definition.detect_change:
            previous = self._store.previous_value(definition.name)
            if self._change_detector.has_changed(previous, value):
                reading.changed = True
                result.changed.append(definition.name)
                self._event_sink.publish(
                    ValueChangedEvent(
                        register=definition.name, old_value=previous, new_value=value
                    )
                )
        return reading

    def _fail_read(
        self,
        group: PollGroup,
        read: OptimizedRead,
        message: str,
        result: PollGroupResult,
    ) -> None:
        _LOGGER.error(
            "Read failed for group %s (slave %d, %s): %s",
            group.name,
            group.slave_id,
            read,
            message,
        )
        result.errors += 1
        result.readings.extend(
            RegisterReading.failed(definition, message) for definition in read.registers
        )
        self._event_sink.publish(
            ErrorEvent(
                message=message,
                group=group.name,
                slave_id=group.slave_id,
                register_type=read.register_type,
                start_address=read.start_address,
                count=read.count,
            )
        )