import logging
import os
from typing import Tuple, Dict

import joblib
import numpy as np
import pandas as pd
from scipy.sparse import hstack
from sklearn.ensemble import RandomForestClassifier
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics import classification_report, accuracy_score
from sklearn.model_selection import train_test_split
from sklearn.preprocessing import LabelEncoder

logger = logging.getLogger(__name__)

# VND amount bins: snack, meal, shopping, bills, large purchases
AMOUNT_BINS = [0, 50_000, 200_000, 1_000_000, 5_000_000, float('inf')]

class CategoryClassifier:
    """
    Suggests a category name from a transaction description and amount
    """

    def __init__(self, model_path: str = None):
        self.model = None
        # char n-grams cope with missing Vietnamese diacritics ("ca phe" vs "cà phê")
        self.vectorizer = TfidfVectorizer(max_features=2000, analyzer='char_wb', ngram_range=(2, 4))
        self.label_encoder = LabelEncoder()
        self.model_path = model_path

        if model_path and os.path.exists(f"{model_path}/category_classifier.pkl"):
            self.load_model(model_path)

    @property
    def is_trained(self) -> bool:
        return self.model is not None

    def preprocess_text(self, text: str) -> str:
        """Lowercase, drop punctuation and digits, collapse spaces"""
        if not text:
            return ""

        text = text.lower()
        text = ''.join(c if c.isalpha() or c.isspace() else ' ' for c in text)
        return ' '.join(text.split())

    def prepare_features(self, df: pd.DataFrame, fit: bool = False):
        """
        Features: description character n-grams and a binned amount
        """
        df = df.copy()
        df['clean_text'] = df['description'].fillna('').apply(self.preprocess_text)

        if fit:
            text_features = self.vectorizer.fit_transform(df['clean_text'])
        else:
            text_features = self.vectorizer.transform(df['clean_text'])

        df['amount_bin'] = pd.cut(
            df['amount'].astype(float),
            bins=AMOUNT_BINS,
            labels=list(range(len(AMOUNT_BINS) - 1)),
            include_lowest=True
        ).astype(float).fillna(0)

        return hstack([text_features, df[['amount_bin']].values])

    def train(self, df: pd.DataFrame) -> Dict[str, float]:
        """
        Train the category classifier

        Args:
            df: DataFrame with columns: description, amount, category

        Returns:
            Dict with training metrics
        """
        logger.info("Training category classifier with %d samples", len(df))

        X = self.prepare_features(df, fit=True)
        y = self.label_encoder.fit_transform(df['category'])

        X_train, X_test, y_train, y_test = train_test_split(
            X, y, test_size=0.2, random_state=42, stratify=y
        )

        self.model = RandomForestClassifier(
            n_estimators=100,
            max_depth=20,
            min_samples_leaf=2,
            random_state=42,
            n_jobs=-1
        )
        self.model.fit(X_train, y_train)

        y_pred = self.model.predict(X_test)
        accuracy = accuracy_score(y_test, y_pred)

        logger.info("Accuracy: %.4f", accuracy)
        logger.debug("Classification report:\n%s", classification_report(
            y_test, y_pred,
            labels=np.arange(len(self.label_encoder.classes_)),
            target_names=self.label_encoder.classes_,
            zero_division=0
        ))

        return {
            "accuracy": accuracy,
            "n_samples": len(df),
            "n_features": X.shape[1],
            "n_classes": len(self.label_encoder.classes_)
        }

    def predict(self, description: str, amount: float) -> Tuple[str, float, Dict[str, float]]:
        """
        Predict category for a transaction

        Returns:
            (predicted_category, confidence, all_probabilities)
        """
        if self.model is None:
            raise ValueError("Model not trained or loaded")

        df = pd.DataFrame([{
            'description': description or "",
            'amount': float(amount or 0)
        }])

        X = self.prepare_features(df, fit=False)
        probabilities = self.model.predict_proba(X)[0]
        best = int(np.argmax(probabilities))

        predicted_category = self.label_encoder.inverse_transform([self.model.classes_[best]])[0]
        confidence = float(probabilities[best])

        all_probs = {
            self.label_encoder.inverse_transform([cls])[0]: float(prob)
            for cls, prob in zip(self.model.classes_, probabilities)
        }

        return predicted_category, confidence, all_probs

    def save_model(self, path: str):
        """Save model, vectorizer, and label encoder"""
        os.makedirs(path, exist_ok=True)

        joblib.dump(self.model, f"{path}/category_classifier.pkl")
        joblib.dump(self.vectorizer, f"{path}/category_vectorizer.pkl")
        joblib.dump(self.label_encoder, f"{path}/category_label_encoder.pkl")

        logger.info("Category classifier saved to %s", path)

    def load_model(self, path: str):
        """Load model, vectorizer, and label encoder"""
        self.model = joblib.load(f"{path}/category_classifier.pkl")
        self.vectorizer = joblib.load(f"{path}/category_vectorizer.pkl")
        self.label_encoder = joblib.load(f"{path}/category_label_encoder.pkl")

        logger.info("Category classifier loaded from %s", path)
