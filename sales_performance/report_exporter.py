"""
レポートのExcel出力モジュール
"""
from pathlib import Path
from typing import List

import pandas as pd

from common import ExcelHandler

from .constants import Metric
from .formatting import format_percent, month_name, variance_label
from .models import RankedEntry
from .performance_report import MonthlyPerformanceReport, percent_of_sales
from .statistics import GeneralTableRow

METRIC_LABELS = {
    Metric.SALES: 'Vendas',
    Metric.COMMISSION: 'Comissão',
    Metric.BONUS: 'Bônus',
    Metric.EXPENSES: 'Despesas',
    Metric.PROFIT: 'Lucro Líquido',
}


class ReportExporter:
    """
    レポートをExcelブックとして書き出すクラス

    使用例:
        exporter = ReportExporter(excel_handler)
        exporter.export_general_table(dashboard.general_table("2024"), Path("exports/tabela.xlsx"))
    """

    def __init__(self, excel_handler: ExcelHandler = None, logger=None):
        self.logger = logger
        self.excel_handler = excel_handler or ExcelHandler(logger)

    def general_table_frame(self, rows: List[GeneralTableRow]) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'Posição': row.position,
                'Setorista': row.totals.label,
                'Vendas': round(row.totals.total_sales, 2),
                'Comissão': round(row.totals.total_commission, 2),
                'Bônus': round(row.totals.total_bonus, 2),
                'Despesas': round(row.totals.total_expenses, 2),
                'Lucro Líquido': round(row.totals.total_profit, 2),
                '% Lucro': format_percent(row.totals.profit_percent_of_sales),
                'Status': row.status,
            }
            for row in rows
        ], columns=['Posição', 'Setorista', 'Vendas', 'Comissão', 'Bônus', 'Despesas',
                    'Lucro Líquido', '% Lucro', 'Status'])

    def ranking_frame(self, entries: List[RankedEntry]) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'Posição': entry.position,
                'Setorista': entry.label,
                'Indicador': entry.metric.value,
                'Valor': round(entry.metric_value, 2),
                'Total de Vendas': round(entry.totals.total_sales, 2),
                'Lucro Líquido': round(entry.totals.total_profit, 2),
                'Meses Ativos': entry.totals.record_count,
            }
            for entry in entries
        ], columns=['Posição', 'Setorista', 'Indicador', 'Valor', 'Total de Vendas',
                    'Lucro Líquido', 'Meses Ativos'])

    def performance_frames(self, report: MonthlyPerformanceReport):
        """(Resumo, Mensal) の2つのDataFrameを作成"""
        averages = report.averages
        summary = pd.DataFrame([
            {
                'Indicador': METRIC_LABELS[metric],
                'Total': round(report.totals.total_of(metric), 2),
                '% sobre Vendas (Total)': format_percent(report.total_percent_of_sales(metric)),
                'Média': round(averages[metric], 2),
                '% sobre Vendas (Média)': format_percent(report.average_percent_of_sales(metric)),
            }
            for metric in Metric
        ])

        monthly_rows = []
        for record, row in zip(report.periods, report.rows()):
            line = {'Período': f"{month_name(record.month)}/{record.year}"}
            for metric in Metric:
                entry = row[metric]
                line[METRIC_LABELS[metric]] = round(entry.value, 2)
                line[f"{METRIC_LABELS[metric]} Var."] = variance_label(entry)
                if metric is not Metric.SALES:
                    line[f"{METRIC_LABELS[metric]} %"] = format_percent(percent_of_sales(entry.value, record.sales))
            monthly_rows.append(line)

        return summary, pd.DataFrame(monthly_rows)

    def export_general_table(self, rows: List[GeneralTableRow], path: Path) -> Path:
        """担当者一覧表を出力"""
        return self.excel_handler.write_sheets(
            path, {'Tabela Geral': self.general_table_frame(rows)},
            titles={'Tabela Geral': 'Tabela Geral de Setoristas'}
        )

    def export_ranking(self, entries: List[RankedEntry], path: Path) -> Path:
        """ランキングを出力"""
        return self.excel_handler.write_sheets(path, {'Ranking': self.ranking_frame(entries)})

    def export_monthly_performance(self, report: MonthlyPerformanceReport, path: Path) -> Path:
        """月次パフォーマンスを出力"""
        summary, monthly = self.performance_frames(report)
        title = f"Relatório de Desempenho - {report.staff_label}"
        return self.excel_handler.write_sheets(
            path, {'Resumo': summary, 'Mensal': monthly},
            titles={'Resumo': title, 'Mensal': title}
        )
