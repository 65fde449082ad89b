from __future__ import annotations


class AnalysisError(ValueError):
    """Base class for failures that abort a whole analysis run."""


class NoMatchingRecords(AnalysisError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"{symbol}の取引データが見つかりませんでした")
        self.symbol = symbol


class InvalidDate(AnalysisError):
    def __init__(self, text: str) -> None:
        super().__init__(f"無効な日付です: {text}")
        self.text = text


class NoValidDates(AnalysisError):
    def __init__(self) -> None:
        super().__init__("有効な日付データが見つかりませんでした")


class CsvParseError(ValueError):
    pass
