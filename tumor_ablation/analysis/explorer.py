"""Exploratory data analysis for tumor measurement datasets."""

import numpy as np
import pandas as pd
from scipy import stats

from tumor_ablation import config
from tumor_ablation.utils import get_logger

log = get_logger(__name__)


class DataExplorer:
    """Numeric exploratory analysis, summarised per feature family."""

    def __init__(self, families: list[str] | None = None):
        self.families = list(families) if families is not None else list(config.FEATURE_FAMILIES)
        self.report = {}

    def run(self, dataset: dict) -> dict:
        """
        Run the exploratory analysis on a loaded dataset.

        Returns a dict of report sections.
        """
        df = dataset["df"]
        feature_names = dataset["feature_names"]
        target_name = dataset["target_name"]

        log.info("Running exploratory data analysis on %d samples", len(df))

        discriminative = self._discriminative_features(df, feature_names, target_name)
        self.report = {
            "basic_stats": self._basic_stats(df, feature_names),
            "class_balance": self._class_balance(df, target_name),
            "feature_correlations": self._correlations(df, feature_names),
            "top_discriminative_features": discriminative[:config.TOP_DISCRIMINATIVE],
            "family_summary": self._family_summary(feature_names, discriminative),
        }

        log.info("EDA complete: %d analysis sections generated", len(self.report))
        return self.report

    def _basic_stats(self, df: pd.DataFrame, features: list[str]) -> dict:
        desc = df[features].describe()
        return {
            "shape": list(df.shape),
            "summary": desc.to_dict(),
        }

    def _class_balance(self, df: pd.DataFrame, target: str) -> dict:
        counts = df[target].value_counts()
        proportions = df[target].value_counts(normalize=True)
        imbalance_ratio = counts.max() / counts.min() if counts.min() > 0 else float("inf")

        balance_status = "balanced" if imbalance_ratio < 1.5 else (
            "moderate_imbalance" if imbalance_ratio < 3.0 else "severe_imbalance"
        )

        log.info("Class balance: %s (ratio=%.2f)", balance_status, imbalance_ratio)

        return {
            "counts": counts.to_dict(),
            "proportions": proportions.round(4).to_dict(),
            "imbalance_ratio": round(float(imbalance_ratio), 4),
            "status": balance_status,
        }

    def _correlations(self, df: pd.DataFrame, features: list[str]) -> dict:
        """Highly correlated pairs, split by whether they share a family."""
        corr = df[features].corr().to_numpy()
        rows, cols = np.triu_indices(len(features), k=1)

        pairs = []
        for i, j in zip(rows, cols):
            r = corr[i, j]
            if abs(r) > config.HIGH_CORRELATION:
                pairs.append({
                    "feature_1": features[i],
                    "feature_2": features[j],
                    "correlation": round(float(r), 4),
                    "same_family": self._family_of(features[i]) == self._family_of(features[j]),
                })

        pairs.sort(key=lambda x: abs(x["correlation"]), reverse=True)
        log.info(
            "Found %d highly correlated feature pairs (|r|>%.1f)",
            len(pairs), config.HIGH_CORRELATION,
        )

        return {
            "highly_correlated_pairs": pairs,
            "n_highly_correlated": len(pairs),
            "n_cross_family": sum(1 for p in pairs if not p["same_family"]),
        }

    def _discriminative_features(self, df: pd.DataFrame, features: list[str],
                                 target: str) -> list[dict]:
        """Rank features by two-sample t statistic between the classes."""
        classes = sorted(df[target].unique())
        if len(classes) != 2:
            log.warning("Discriminative analysis requires exactly 2 classes, found %d", len(classes))
            return []

        group_0 = df[df[target] == classes[0]]
        group_1 = df[df[target] == classes[1]]

        results = []
        for feat in features:
            t_stat, p_val = stats.ttest_ind(group_0[feat], group_1[feat])
            std = df[feat].std()
            effect_size = abs(group_0[feat].mean() - group_1[feat].mean()) / std if std > 0 else 0.0

            results.append({
                "feature": feat,
                "family": self._family_of(feat),
                "t_statistic": round(float(t_stat), 4),
                "p_value": float(p_val),
                "effect_size_cohens_d": round(float(effect_size), 4),
            })

        results.sort(key=lambda x: abs(x["t_statistic"]), reverse=True)

        log.info("Top discriminative features:")
        for i, r in enumerate(results[:5]):
            log.info(
                "  %d. %s (t=%.2f, d=%.2f, p=%.2e)",
                i + 1, r["feature"], r["t_statistic"],
                r["effect_size_cohens_d"], r["p_value"],
            )
        return results

    def _family_summary(self, features: list[str], discriminative: list[dict]) -> list[dict]:
        abs_t = {r["feature"]: abs(r["t_statistic"]) for r in discriminative}
        summary = []
        for family in self.families:
            members = [f for f in features if f.startswith(family)]
            scores = [abs_t[f] for f in members if f in abs_t and np.isfinite(abs_t[f])]
            summary.append({
                "family": family,
                "columns": members,
                "mean_abs_t": round(float(np.mean(scores)), 4) if scores else None,
            })
        return summary

    def _family_of(self, feature: str) -> str | None:
        for family in self.families:
            if feature.startswith(family):
                return family
        return None
