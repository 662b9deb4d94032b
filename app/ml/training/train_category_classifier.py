"""
Training script for the category classifier
Run with: python -m app.ml.training.train_category_classifier
"""

import logging
import os

import numpy as np
import pandas as pd

from app.config import settings
from app.core.logging_config import setup_logging
from app.ml.models.category_classifier import CategoryClassifier

logger = logging.getLogger(__name__)

# Category names match the seeded default categories
DESCRIPTIONS = {
    'Food & Drinks': ['cà phê', 'ca phe sua da', 'trà sữa', 'phở bò', 'bún chả', 'cơm trưa',
                      'bánh mì', 'ăn tối', 'coffee', 'lunch with team', 'dinner', 'highlands', 'starbucks'],
    'Transport': ['grab', 'grab bike', 'đổ xăng', 'xang xe', 'taxi', 'gửi xe', 'vé xe buýt',
                  'be car', 'uber', 'parking', 'train ticket'],
    'Shopping': ['shopee', 'lazada', 'quần áo', 'giày thể thao', 'tiki', 'uniqlo',
                 'clothes', 'new shoes', 'mua sắm'],
    'Entertainment': ['xem phim', 'cgv', 'karaoke', 'netflix', 'spotify', 'game',
                      'concert ticket', 'movie night', 'du lịch'],
    'Bills & Utilities': ['tiền điện', 'tiền nước', 'internet', 'wifi fpt', 'tiền nhà',
                          'điện thoại', 'electricity bill', 'rent', 'viettel'],
    'Health': ['thuốc', 'nhà thuốc long châu', 'khám bệnh', 'nha khoa', 'gym',
               'pharmacy', 'doctor visit', 'vitamin'],
    'Education': ['học phí', 'khóa học tiếng anh', 'sách', 'udemy', 'coursera',
                  'tuition', 'books', 'ielts course'],
}

AMOUNT_RANGES = {
    'Food & Drinks': (20_000, 300_000),
    'Transport': (15_000, 500_000),
    'Shopping': (100_000, 3_000_000),
    'Entertainment': (50_000, 1_500_000),
    'Bills & Utilities': (200_000, 8_000_000),
    'Health': (50_000, 2_000_000),
    'Education': (300_000, 10_000_000),
}


def generate_sample_data(n_samples: int = 1500) -> pd.DataFrame:
    """
    Generate sample transaction descriptions for training
    """
    rng = np.random.default_rng(42)
    categories = list(DESCRIPTIONS)

    data = []
    for _ in range(n_samples):
        category = categories[rng.integers(len(categories))]
        description = DESCRIPTIONS[category][rng.integers(len(DESCRIPTIONS[category]))]
        min_amt, max_amt = AMOUNT_RANGES[category]

        data.append({
            'description': description,
            'amount': round(float(rng.uniform(min_amt, max_amt)), -3),
            'category': category
        })

    return pd.DataFrame(data)


def train_category_classifier(df: pd.DataFrame, save_path: str):
    """Train and save category classifier"""
    classifier = CategoryClassifier()
    metrics = classifier.train(df)
    classifier.save_model(save_path)

    cat, conf, _ = classifier.predict("cà phê sáng", 35_000)
    logger.info("Test prediction: 'cà phê sáng' 35,000 -> %s (confidence %.2f)", cat, conf)

    return metrics


def main():
    setup_logging(settings.LOG_LEVEL)

    model_save_path = settings.MODEL_PATH
    os.makedirs(model_save_path, exist_ok=True)

    df = generate_sample_data()
    logger.info("Generated %d sample transactions over %d categories", len(df), df['category'].nunique())

    metrics = train_category_classifier(df, model_save_path)
    for key, value in metrics.items():
        logger.info("%s: %s", key, value)


if __name__ == "__main__":
    main()
