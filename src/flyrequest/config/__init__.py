"""flyrequest configuration properties."""
