"""Units, project model, image bookkeeping, folder watching and cutting guides for printing proxy cards."""

__version__ = "0.1.0"