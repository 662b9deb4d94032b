"""
ML Model Loader - Singleton pattern for loading models once
"""

import logging
import os
from typing import Optional

from app.ml.models.category_classifier import CategoryClassifier
from app.config import settings

logger = logging.getLogger(__name__)

class ModelLoader:
    """
    Singleton class to load and cache the category classifier
    """
    _instance = None
    _models_loaded = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ModelLoader, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not ModelLoader._models_loaded:
            self.category_classifier: Optional[CategoryClassifier] = None
            self.load_models()
            ModelLoader._models_loaded = True

    def load_models(self):
        """Load trained models from MODEL_PATH; missing files leave the model unset"""
        model_path = settings.MODEL_PATH

        if not os.path.exists(f"{model_path}/category_classifier.pkl"):
            logger.warning("Category classifier not found in %s. Run training first.", model_path)
            self.category_classifier = None
            return

        try:
            self.category_classifier = CategoryClassifier(model_path)
        except Exception:
            logger.exception("Error loading category classifier from %s", model_path)
            self.category_classifier = None

    def get_category_classifier(self) -> Optional[CategoryClassifier]:
        return self.category_classifier

    def reload_models(self):
        """Reload models (useful after retraining)"""
        self.load_models()

# Global instance
model_loader = ModelLoader()
