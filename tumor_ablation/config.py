"""Configuration constants for the tumor ablation study."""

# WDBC column layout
ID_COLUMN = "id"
TARGET_COLUMN = "diagnosis"
MALIGNANT = "M"
BENIGN = "B"
LABELS = (MALIGNANT, BENIGN)

# Feature families, each with mean / standard-error / worst variants.
# Order here is the order of the ablation table.
FEATURE_FAMILIES = [
    "radius",
    "texture",
    "perimeter",
    "area",
    "smoothness",
    "compactness",
    "concavity",
    "concave points",
    "symmetry",
    "fractal_dimension",
]
FEATURE_VARIANTS = ["mean", "se", "worst"]

# Experiment defaults
DEFAULT_TEST_SIZE = 0.2
DEFAULT_CV_FOLDS = 5
RANDOM_STATE = 42

# Cost of the fixed linear SVM used by the ablation sweep when no
# tuned value is available.
DEFAULT_ABLATION_COST = 1.0

# Candidate grids for GridSearch, keyed by model name.
# Keys are Pipeline parameter paths ("clf__" = the classifier step).
PARAM_GRIDS = {
    "random_forest": {
        "clf__n_estimators": [100, 300],
        "clf__max_depth": [None, 5, 10],
    },
    "svm_linear": {
        "clf__C": [0.01, 0.1, 1.0, 10.0, 100.0],
    },
    "svm_polynomial": {
        "clf__C": [0.1, 1.0, 10.0],
        "clf__degree": [2, 3],
    },
    "svm_rbf": {
        "clf__C": [0.1, 1.0, 10.0, 100.0],
        "clf__gamma": ["scale", 0.01, 0.1],
    },
    "svm_sigmoid": {
        "clf__C": [0.1, 1.0, 10.0],
        "clf__gamma": ["scale", 0.01],
    },
}

# Model whose cost feeds the ablation sweep
ABLATION_MODEL = "svm_linear"

# Exploratory analysis thresholds
HIGH_CORRELATION = 0.9
TOP_DISCRIMINATIVE = 10
