import pytest

from app.ml.models.category_classifier import CategoryClassifier
from app.ml.training.train_category_classifier import generate_sample_data, train_category_classifier


@pytest.fixture(scope="module")
def sample_data():
    return generate_sample_data(300)


def test_sample_data_shape(sample_data):
    assert list(sample_data.columns) == ["description", "amount", "category"]
    assert len(sample_data) == 300
    assert (sample_data["amount"] > 0).all()


def test_untrained_classifier_refuses_to_predict():
    classifier = CategoryClassifier()
    assert classifier.is_trained == False
    with pytest.raises(ValueError):
        classifier.predict("cà phê", 25000)


def test_train_save_and_load(sample_data, tmp_path):
    metrics = train_category_classifier(sample_data, str(tmp_path))
    assert metrics["n_samples"] == 300
    assert 0 <= metrics["accuracy"] <= 1

    classifier = CategoryClassifier(model_path=str(tmp_path))
    assert classifier.is_trained

    category, confidence, probabilities = classifier.predict("đổ xăng", 100000)
    assert category in set(sample_data["category"])
    assert 0 <= confidence <= 1
    assert sum(probabilities.values()) == pytest.approx(1.0)


def test_preprocess_text():
    assert CategoryClassifier().preprocess_text("Cà phê 25k!!") == "cà phê k"
