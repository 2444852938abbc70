"""wordwise: adaptive vocabulary study engine."""
