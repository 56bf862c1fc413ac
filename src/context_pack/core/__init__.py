"""Core scanning, classification and reporting functionality."""

from __future__ import annotations

from .analyzer import Analyzer
from .classifier import classify
from .results import AnalysisResult, analyze
from .scanner import Scanner, ScanResult, walk

__all__ = ["Scanner", "ScanResult", "walk", "classify", "analyze", "AnalysisResult", "Analyzer"]
