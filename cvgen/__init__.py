"""cvgen: master-profile resume backend with credit-gated AI generation."""

__version__ = "0.1.0"
