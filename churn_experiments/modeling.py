"""
Gradient-boosted churn classifier for experiments.

Wires scikit-learn preprocessing and successive-halving search around
a LightGBM classifier:
1. One-hot encode categoricals, pass numerics through
2. Race randomly sampled hyperparameters with HalvingRandomSearchCV
   (weak candidates are dropped after each round on a small budget)
3. Refit the winner with early stopping on the validation split
"""

from typing import Optional

import numpy as np
import pandas as pd
import lightgbm as lgb
from sklearn.compose import ColumnTransformer
from sklearn.experimental import enable_halving_search_cv  # noqa: F401
from sklearn.model_selection import HalvingRandomSearchCV, StratifiedKFold
from sklearn.preprocessing import OneHotEncoder

from .config import ExperimentConfig


def build_preprocessor(categorical: list[str], numeric: list[str]) -> ColumnTransformer:
    """
    Build the feature preprocessor.

    Unknown categories are ignored at predict time so a level that
    never appeared in training does not break scoring.
    """
    return ColumnTransformer(
        transformers=[
            (
                "cat",
                OneHotEncoder(handle_unknown="ignore", sparse_output=False),
                categorical,
            ),
            ("num", "passthrough", numeric),
        ]
    )


class ModelTrainer:
    """
    Hyperparameter search and final fit for the churn classifier.

    Usage:
        trainer = ModelTrainer(config).fit(train_df, val_df)
        probabilities = trainer.predict_proba(test_df)
    """

    def __init__(self, config: ExperimentConfig):
        self.config = config
        self.preprocessor: Optional[ColumnTransformer] = None
        self.search: Optional[HalvingRandomSearchCV] = None
        self.model: Optional[lgb.LGBMClassifier] = None
        self.feature_columns: list[str] = []
        self.best_params: dict = {}

    def _split_xy(self, df: pd.DataFrame) -> tuple[pd.DataFrame, pd.Series]:
        return df.drop(columns=[self.config.target]), df[self.config.target]

    def _classifier(self, y_train: pd.Series, **params) -> lgb.LGBMClassifier:
        """LightGBM classifier with the experiment's fixed settings."""
        if self.config.balance_classes:
            positives = int(y_train.sum())
            negatives = len(y_train) - positives
            params["scale_pos_weight"] = negatives / positives if positives else 1.0

        return lgb.LGBMClassifier(
            objective="binary",
            importance_type="gain",
            random_state=self.config.random_state,
            verbose=-1,
            **params,
        )

    def fit(self, train_df: pd.DataFrame, val_df: pd.DataFrame) -> "ModelTrainer":
        """
        Search hyperparameters on train, then refit with early stopping.

        Args:
            train_df: Training split with target column
            val_df: Validation split used for early stopping

        Returns:
            self
        """
        X_train, y_train = self._split_xy(train_df)
        X_val, y_val = self._split_xy(val_df)
        self.feature_columns = X_train.columns.tolist()

        numeric = X_train.select_dtypes(include="number").columns.tolist()
        categorical = [col for col in self.feature_columns if col not in numeric]
        self.preprocessor = build_preprocessor(categorical, numeric)

        Xt_train = self.preprocessor.fit_transform(X_train)
        Xt_val = self.preprocessor.transform(X_val)

        # Racing search: each round keeps the best 1/factor candidates
        self.search = HalvingRandomSearchCV(
            estimator=self._classifier(
                y_train, n_estimators=self.config.search_estimators, n_jobs=1
            ),
            param_distributions=self.config.param_distributions,
            n_candidates=self.config.search_candidates,
            factor=self.config.search_factor,
            cv=StratifiedKFold(
                n_splits=self.config.cv_folds,
                shuffle=True,
                random_state=self.config.random_state,
            ),
            scoring=self.config.search_scoring,
            refit=False,
            random_state=self.config.random_state,
            n_jobs=self.config.n_jobs,
        )
        self.search.fit(Xt_train, y_train)
        self.best_params = dict(self.search.best_params_)

        # Early stopping picks the number of rounds, up to max_estimators
        self.model = self._classifier(y_train, **{
            **self.best_params,
            "n_estimators": self.config.max_estimators,
            "n_jobs": self.config.n_jobs,
        })
        self.model.fit(
            Xt_train,
            y_train,
            eval_set=[(Xt_val, y_val)],
            eval_metric="binary_logloss",
            callbacks=[
                lgb.early_stopping(self.config.early_stopping_rounds, verbose=False)
            ],
        )

        return self

    def _check_fitted(self) -> None:
        if self.model is None or self.preprocessor is None:
            raise RuntimeError("ModelTrainer must be fit before use")

    @property
    def best_iteration(self) -> int:
        """Boosting round kept by early stopping."""
        self._check_fitted()
        return int(self.model.best_iteration_)

    def predict_proba(self, df: pd.DataFrame) -> np.ndarray:
        """
        Churn probability for each row.

        Args:
            df: Records with the training feature columns (target optional)

        Returns:
            Array of probabilities in [0, 1]
        """
        self._check_fitted()
        X = self.preprocessor.transform(df[self.feature_columns])
        return self.model.predict_proba(X)[:, 1]

    def cv_results(self) -> pd.DataFrame:
        """Per-candidate, per-round search results."""
        self._check_fitted()
        results = pd.DataFrame(self.search.cv_results_)
        columns = ["iter", "n_resources", "params", "mean_test_score", "std_test_score"]
        return (
            results[columns]
            .sort_values(["iter", "mean_test_score"], ascending=[False, False])
            .reset_index(drop=True)
        )

    def feature_importance(self) -> pd.DataFrame:
        """Gain importance per encoded feature, highest first."""
        self._check_fitted()
        return (
            pd.DataFrame({
                "feature": self.preprocessor.get_feature_names_out(),
                "importance": self.model.feature_importances_,
            })
            .sort_values("importance", ascending=False)
            .reset_index(drop=True)
        )
