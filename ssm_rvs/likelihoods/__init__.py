from .lba import choice_probability, lba_cdf, lba_pdf, n1pdf

__all__ = ["lba_pdf", "lba_cdf", "n1pdf", "choice_probability"]
