import pandas as pd
import pytest

from coursework.analyzers.item_analysis import ItemAnalysisSummary
from coursework.reports.item_analysis_report import BASE_COLUMNS, ItemAnalysisReport


@pytest.fixture
def report(quiz, quiz_submissions):
    return ItemAnalysisReport(ItemAnalysisSummary(quiz, quiz_submissions))


def test_columns_cover_the_widest_question(report):
    assert report.distractor_count == 3
    assert report.columns[: len(BASE_COLUMNS)] == BASE_COLUMNS
    assert report.columns[-1] == "Point Biserial of Distractor 3"


def test_one_row_per_analyzed_question(report):
    df = report.to_dataframe()
    assert list(df["Question Id"]) == ["q1", "q2", "q3"]
    assert (df["Quiz Question Count"] == 3).all()


def test_row_values(report):
    row = report.to_dataframe().set_index("Question Id").loc["q3"]
    assert row["Answered Student Count"] == 3
    assert row["Correct Student Count"] == 2
    assert row["Correct Middle Student Count"] == 1
    assert row["Variance"] == pytest.approx(0.2222222)
    assert row["Point Biserial of Correct"] == pytest.approx(0.5)
    assert row["Point Biserial of Distractor 1"] == pytest.approx(-0.5)
    assert pd.isna(row["Point Biserial of Distractor 2"])
    assert row["Alpha"] == pytest.approx(-2.0)


def test_true_false_rows_leave_missing_distractors_empty(report):
    row = report.to_dataframe().set_index("Question Id").loc["q1"]
    assert pd.isna(row["Point Biserial of Distractor 2"])


def test_to_csv(report, tmp_path):
    path = report.to_csv(tmp_path / "items.csv")
    df = pd.read_csv(path)
    assert list(df.columns) == report.columns
    assert len(df) == 3
