"""
Channel catalog for the sample columns of a .Dpr data block
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class ChannelDef:
    """Name and unit of one sample column"""
    name: str
    unit: str

    @property
    def label(self) -> str:
        """Axis label, e.g. 'engine_rpm (RPM)'"""
        return f"{self.name} ({self.unit})" if self.unit else self.name


CHANNELS: List[ChannelDef] = [
    ChannelDef('raw_enc_counter', 'counts'),
    ChannelDef('raw_enc2_pos', 'counts'),
    ChannelDef('elapsed_time', 's'),
    ChannelDef('raw_hw_counter3', 'counts'),
    ChannelDef('raw_hw_counter4', 'counts'),
    ChannelDef('engine_rpm', 'RPM'),
    ChannelDef('raw_hw_counter6', 'counts'),
    ChannelDef('roller_distance', 'm'),
    ChannelDef('roller_omega', 'rad/s'),
    ChannelDef('wheel_speed_mph', 'mph'),
    # Expansion inputs, meaning depends on the rig wiring
    *[ChannelDef(f'expansion_{i}', '') for i in range(1, 13)],
    ChannelDef('air_temp', 'C'),
    ChannelDef('baro_pressure', 'mbar'),
    ChannelDef('humidity', '%'),
    ChannelDef('aux_channel', ''),
    ChannelDef('cooler_temp', 'C'),
    ChannelDef('load_cell_temp', 'C'),
    ChannelDef('load_cell_torque', 'ft-lb'),
    ChannelDef('tacho_rpm', 'RPM'),
    ChannelDef('brake_load_cmd', '%'),
    ChannelDef('raw_enc_delta', 'counts'),
    ChannelDef('load_cell_state', ''),
    ChannelDef('brake_active', ''),
    *[ChannelDef(f'reserved_{i}', '') for i in range(34, 41)],
]

NUM_CHANNELS = len(CHANNELS)

# Slots consumed by the torque derivation
CH_ELAPSED_TIME = 2
CH_ENGINE_RPM = 5
CH_ROLLER_OMEGA = 8
CH_WHEEL_SPEED = 9

REQUIRED_CHANNELS = (CH_ELAPSED_TIME, CH_ENGINE_RPM, CH_ROLLER_OMEGA, CH_WHEEL_SPEED)


def channel_index(name: str) -> int:
    """Return the catalog slot for a channel name"""
    for i, channel in enumerate(CHANNELS):
        if channel.name == name:
            return i
    raise ValueError(f"Unknown channel: {name}")
