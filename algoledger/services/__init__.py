"""Services — imperative shell that sequences registry operations and logs outcomes."""
