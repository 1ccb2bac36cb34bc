class DatasetError(ValueError):
    """
    Raised when a dataset does not have the shape the tutorial expects:
    a required column is missing, or a column that must be binary holds
    values other than 0 and 1.

    Problems inside the fitted models themselves (singular designs,
    non-numeric data reaching statsmodels) are not translated and
    propagate unchanged.
    """
    pass
