"""Drive a repetition counter with a synthetic squat stream and print its events."""

import sys
from pathlib import Path

# Allow running this script directly without installing the package.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from repcount.repdetect.counter import RepetitionCounter  # noqa: E402
from repcount.repdetect.extrema import ExtremumKind  # noqa: E402
from repcount.repdetect.registry import ActionDescriptor, DescriptorRegistry  # noqa: E402
from repcount.signals.kinematics import Axis, Landmark, PoseSnapshot  # noqa: E402

FPS = 30.0
REP_FRAMES = 60


class PrintingListener:
    def repetitions_changed(self, counter, count):
        print(f"repetitions={count}")

    def action_began(self, counter, fault_tolerance):
        print(f"action began (fault tolerance {fault_tolerance}s)")

    def action_ended(self, counter, fault_tolerance):
        print(f"action ended (fault tolerance {fault_tolerance}s)")


class FrameClock:
    def __init__(self) -> None:
        self.frame = 0

    def __call__(self) -> float:
        return self.frame / FPS


def hip_height(frame: int) -> float:
    """Hip y in a 1.0-high frame: standing at 0.4, bottom of the squat at 0.7."""
    phase = frame % REP_FRAMES
    depth = phase / (REP_FRAMES / 2) if phase < REP_FRAMES / 2 else (REP_FRAMES - phase) / (REP_FRAMES / 2)
    return 0.4 + 0.3 * depth


def run_examples(n_reps: int = 5) -> None:
    registry = DescriptorRegistry()
    # Image y grows downwards: standing up is a minimum of hip y following the bottom maximum.
    registry.register(
        "squat",
        ActionDescriptor.build(
            {"left_hip", "right_hip"},
            [ExtremumKind.MAXIMUM, ExtremumKind.MINIMUM],
            Axis.VERTICAL,
        ),
    )

    clock = FrameClock()
    listener = PrintingListener()
    counter = RepetitionCounter("squat", registry, listener, clock=clock)

    for frame in range(REP_FRAMES * n_reps + REP_FRAMES // 2):
        clock.frame = frame
        counter.register_action_detection("squat")
        snapshot = PoseSnapshot(
            landmarks=(Landmark("left_hip", (0.5, hip_height(frame))),),
            size=(0.5625, 1.0),
        )
        counter.register_pose(snapshot)

    clock.frame += 1
    counter.register_action_detection("idle")
    print(f"total action time: {counter.total_action_time:.2f}s, repetitions: {counter.repetitions}")


if __name__ == "__main__":
    run_examples()
