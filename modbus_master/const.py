"""Constants for the Modbus master engine and polling scheduler.

Values that define wire limits come from the Modbus Application Protocol
Specification V1.1b3. Tuning values for the read optimizer and the scheduler
live here as well so that every module shares the same defaults.
"""

from __future__ import annotations

# Addressing
DEFAULT_SLAVE_ID = 1
MIN_SLAVE_ID = 0  # 0 = broadcast on RTU links
MAX_SLAVE_ID = 255  # TCP unit identifiers use the full byte
MAX_ADDRESS = 0xFFFF
MAX_REGISTER_VALUE = 0xFFFF

# Per-request quantity limits
MAX_REGISTERS_PER_READ = 125
MAX_BITS_PER_READ = 2000
MAX_REGISTERS_PER_WRITE = 123
MAX_BITS_PER_WRITE = 1968

# Framing
EXCEPTION_FLAG = 0x80
FUNCTION_CODE_MASK = 0x7F
RTU_MIN_FRAME_SIZE = 4  # slave + function + CRC
RTU_MIN_EXCEPTION_FRAME_SIZE = 5  # slave + function + exception + CRC
RTU_CRC_SIZE = 2
MBAP_HEADER_SIZE = 7
MBAP_PROTOCOL_ID = 0
TCP_MIN_FRAME_SIZE = 8  # MBAP header + function
COIL_ON = 0xFF00
COIL_OFF = 0x0000

# Read optimizer
MAX_GAP_SIZE = 5  # Maximum unused registers bridged inside one read

# Polling scheduler
FLOAT_CHANGE_TOLERANCE = 0.0001
TICK_INTERVAL = 0.01  # Sleep between due-checks (seconds)
DEFAULT_POLL_INTERVAL = 1.0  # seconds

# Event delivery
DEFAULT_EVENT_QUEUE_SIZE = 1000

# Transport
DEFAULT_RESPONSE_TIMEOUT = 1.0  # seconds

# Configuration files
SUPPORTED_CONFIG_VERSION = "1."
