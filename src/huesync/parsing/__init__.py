"""Natural-language phrases to device states."""

from .state_parser import ATMOSPHERIC_KEYWORDS, TRANSITION_CUES, is_atmospheric, parse

__all__ = ["ATMOSPHERIC_KEYWORDS", "TRANSITION_CUES", "is_atmospheric", "parse"]
