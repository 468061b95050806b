"""
Tumor feature-family ablation.

Loads the Wisconsin Diagnostic Breast Cancer measurements, compares a
random forest against four SVM kernels, and estimates how much each of the
ten measurement families (radius, texture, ...) contributes to a linear
SVM by leaving it out and re-measuring cross-validated accuracy.

DISCLAIMER: This is a machine learning research tool for a publicly
available dataset. It does NOT provide medical diagnoses or replace
professional medical advice.
"""

__version__ = "0.1.0"
