"""Procedural scene synthesis."""

from .synthesizer import SceneParameters, SceneParameterSynthesizer

__all__ = ["SceneParameterSynthesizer", "SceneParameters"]
