"""
セトリスタ売上パフォーマンス集計パッケージ

純利益計算・担当者別集計・前期比較・ランキングの集計エンジンと、
レコードストア、ダッシュボードサービス、取り込み・出力処理をまとめる。
"""

from .constants import Direction, GroupBy, Metric, RankingMetric
from .models import RankedEntry, SalesRecord, StaffMember, StaffTotals, VarianceEntry
from .profit_calculator import compute_net_profit, net_profit_of, to_amount
from .aggregator import aggregate_by_month, aggregate_by_staff, filter_by_staff, filter_by_year, summarize
from .variance import compute_variance_sequence, compute_variance_table, growth_percent, sort_chronologically
from .ranking import leaders, rank
from .statistics import general_table, period_statistics
from .performance_report import MonthlyPerformanceReport, build_monthly_performance
from .record_store import InMemoryRepository, JsonRecordStore, RecordStore, Repository
from .migrations import CURRENT_SCHEMA_VERSION, migrate
from .dashboard_service import SalesDashboard
from .report_exporter import ReportExporter
from .record_importer import RecordImporter

__all__ = [
    'Direction',
    'GroupBy',
    'Metric',
    'RankingMetric',
    'RankedEntry',
    'SalesRecord',
    'StaffMember',
    'StaffTotals',
    'VarianceEntry',
    'compute_net_profit',
    'net_profit_of',
    'to_amount',
    'aggregate_by_month',
    'aggregate_by_staff',
    'filter_by_staff',
    'filter_by_year',
    'summarize',
    'compute_variance_sequence',
    'compute_variance_table',
    'growth_percent',
    'sort_chronologically',
    'leaders',
    'rank',
    'general_table',
    'period_statistics',
    'MonthlyPerformanceReport',
    'build_monthly_performance',
    'InMemoryRepository',
    'JsonRecordStore',
    'RecordStore',
    'Repository',
    'CURRENT_SCHEMA_VERSION',
    'migrate',
    'SalesDashboard',
    'ReportExporter',
    'RecordImporter'
]
