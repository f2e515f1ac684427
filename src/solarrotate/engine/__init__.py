"""Engine package orchestrating a solar rotation evaluation."""

from .component import Evaluation, SolarRotationComponent

__all__ = ["SolarRotationComponent", "Evaluation"]
