"""Services backing the ATC radio: weather and controller dialogue."""
