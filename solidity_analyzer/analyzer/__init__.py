"""Statement segmentation and the pragma/import mini-parsers."""
