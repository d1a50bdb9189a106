#!/usr/bin/env python3
"""
セトリスタ売上ダッシュボード メイン実行スクリプト

使用方法:
    python run_sales_dashboard.py staff add "Ana Souza" --phone 11999990000 --hired-on 2023-02-01
    python run_sales_dashboard.py record add <staff_id> 01 2024 1000 --commission 100 --expenses 50
    python run_sales_dashboard.py import vendas_2024.csv
    python run_sales_dashboard.py ranking --year 2024 --metric profit_percent
    python run_sales_dashboard.py performance <staff_id> --export exports/ana.xlsx
    python run_sales_dashboard.py table --year 2024 --export exports/tabela.xlsx
"""

import sys
import argparse
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent))

from common import ConfigManager, ErrorHandler, UnifiedLogger
from common.error_handling.exceptions import SalesDashboardError
from sales_performance import JsonRecordStore, RecordImporter, ReportExporter, SalesDashboard
from sales_performance.constants import GroupBy, Metric, RankingMetric
from sales_performance.formatting import format_currency, format_percent, month_name, variance_label


def parse_arguments(argv=None):
    """コマンドライン引数を解析"""
    parser = argparse.ArgumentParser(
        description="セトリスタ売上パフォーマンス集計システム",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  %(prog)s staff list                          # 担当者一覧
  %(prog)s record list --year 2024             # 2024年の売上レコード一覧
  %(prog)s ranking --year 2024                 # 2024年の純利益ランキング
  %(prog)s leaders --year 2024                 # 部門別1位
  %(prog)s stats --year 2024 --staff <id>      # 担当者の統計
        """
    )

    parser.add_argument('--config', type=Path, help='設定ファイルのパス')
    parser.add_argument('--store', type=Path, help='レコードストア(JSON)のパス（設定より優先）')
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='ログレベル（設定より優先）'
    )
    parser.add_argument(
        '--group-by',
        choices=[group_by.value for group_by in GroupBy],
        help='担当者別集計のキー（設定より優先）'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    # staff
    staff_parser = subparsers.add_parser('staff', help='担当者の管理')
    staff_commands = staff_parser.add_subparsers(dest='action', required=True)

    staff_add = staff_commands.add_parser('add', help='担当者を登録')
    staff_add.add_argument('name', help='氏名')
    staff_add.add_argument('--phone', help='電話番号')
    staff_add.add_argument('--hired-on', help='入社日 (YYYY-MM-DD)')

    staff_commands.add_parser('list', help='担当者一覧')

    staff_update = staff_commands.add_parser('update', help='担当者情報を更新')
    staff_update.add_argument('staff_id', help='担当者ID')
    staff_update.add_argument('--name', help='氏名')
    staff_update.add_argument('--phone', help='電話番号')
    staff_update.add_argument('--hired-on', help='入社日 (YYYY-MM-DD)')

    staff_delete = staff_commands.add_parser('delete', help='担当者を削除')
    staff_delete.add_argument('staff_id', help='担当者ID')

    # record
    record_parser = subparsers.add_parser('record', help='売上レコードの管理')
    record_commands = record_parser.add_subparsers(dest='action', required=True)

    record_add = record_commands.add_parser('add', help='売上レコードを登録')
    record_add.add_argument('staff_id', help='担当者ID')
    record_add.add_argument('month', help='月 (01-12)')
    record_add.add_argument('year', help='年 (例: 2024)')
    record_add.add_argument('sales', help='売上')
    record_add.add_argument('--commission', default='0', help='コミッション')
    record_add.add_argument('--bonus', default='0', help='ボーナス')
    record_add.add_argument('--expenses', default='0', help='経費')

    record_list = record_commands.add_parser('list', help='売上レコード一覧')
    record_list.add_argument('--year', help='対象年')
    record_list.add_argument('--staff', help='担当者ID')

    record_delete = record_commands.add_parser('delete', help='売上レコードを削除')
    record_delete.add_argument('record_id', help='レコードID')

    # import
    import_parser = subparsers.add_parser('import', help='CSVから売上レコードを取り込み')
    import_parser.add_argument('csv_file', type=Path, help='CSVファイル')

    # reports
    ranking_parser = subparsers.add_parser('ranking', help='担当者ランキング')
    ranking_parser.add_argument('--year', help='対象年（省略時は全期間）')
    ranking_parser.add_argument(
        '--metric',
        choices=[metric.value for metric in RankingMetric],
        default=RankingMetric.TOTAL_PROFIT.value,
        help='並び替え指標（デフォルト: total_profit）'
    )
    ranking_parser.add_argument('--export', type=Path, help='Excel出力先')

    leaders_parser = subparsers.add_parser('leaders', help='部門別1位')
    leaders_parser.add_argument('--year', help='対象年（省略時は全期間）')

    performance_parser = subparsers.add_parser('performance', help='月次パフォーマンス')
    performance_parser.add_argument('staff_id', nargs='?', help='担当者ID（省略時は全担当者）')
    performance_parser.add_argument('--window', type=int, help='対象期間数（設定より優先）')
    performance_parser.add_argument('--export', type=Path, help='Excel出力先')

    table_parser = subparsers.add_parser('table', help='担当者一覧表')
    table_parser.add_argument('--year', help='対象年（省略時は全期間）')
    table_parser.add_argument('--export', type=Path, help='Excel出力先')

    stats_parser = subparsers.add_parser('stats', help='期間統計')
    stats_parser.add_argument('--year', help='対象年（省略時は全期間）')
    stats_parser.add_argument('--staff', help='担当者ID')

    # config
    config_parser = subparsers.add_parser('config', help='設定の確認・保存')
    config_commands = config_parser.add_subparsers(dest='action', required=True)
    config_commands.add_parser('show', help='現在の設定を表示')
    config_save = config_commands.add_parser('save', help='現在の設定をファイルに保存')
    config_save.add_argument('path', nargs='?', type=Path, help='保存先（省略時は読み込んだ設定ファイル）')

    return parser.parse_args(argv)


def build_dashboard(args):
    """設定・ロガー・レコードストアからダッシュボードを組み立てる"""
    config = ConfigManager(args.config)

    logging_settings = config.get_logging_settings()
    logger = UnifiedLogger(
        "sales_dashboard",
        level=args.log_level or logging_settings['log_level'],
        log_file=logging_settings['log_file']
    )
    config.logger = logger.logger

    if args.group_by:
        config.update_config({'group_by': args.group_by})
    config.validate_configuration()
    logger.log_configuration_info(config.get_all_settings())

    storage = config.get_storage_settings()
    store = JsonRecordStore(args.store or storage['store_path'], encoding=storage['encoding'], logger=logger.logger)

    return SalesDashboard(store, config=config, logger=logger), config


def print_staff(dashboard: SalesDashboard) -> None:
    members = dashboard.list_staff()
    if not members:
        print("担当者が登録されていません。")
        return
    for member in members:
        hired_on = member.hired_on.isoformat() if member.hired_on else '-'
        print(f"  {member.id}  {member.name}  電話: {member.phone or '-'}  入社日: {hired_on}")


def print_records(records) -> None:
    if not records:
        print("売上レコードがありません。")
        return
    for record in records:
        print(
            f"  {record.id}  {month_name(record.month)}/{record.year}  {record.staff_name}  "
            f"売上: {format_currency(record.sales)}  純利益: {format_currency(record.net_profit)}"
        )


def print_ranking(entries, metric: RankingMetric) -> None:
    if not entries:
        print("ランキング対象のデータがありません。")
        return
    percent_metrics = (RankingMetric.PROFIT_PERCENT, RankingMetric.EXPENSE_PERCENT, RankingMetric.GROWTH)
    for entry in entries:
        value = format_percent(entry.metric_value) if metric in percent_metrics else format_currency(entry.metric_value)
        print(f"  {entry.position:>3}. {entry.label:<30} {value}")


def print_performance(report) -> None:
    print(f"月次パフォーマンス: {report.staff_label}")
    print("-" * 60)
    for record, row in zip(report.periods, report.rows()):
        cells = [f"{month_name(record.month, short=True)}/{record.year}"]
        for metric in Metric:
            entry = row[metric]
            cells.append(f"{metric.value}={format_currency(entry.value)} ({variance_label(entry)})")
        print("  " + "  ".join(cells))
    print("-" * 60)
    for metric in Metric:
        print(
            f"  {metric.value:<12} 合計: {format_currency(report.totals.total_of(metric))}"
            f"  平均: {format_currency(report.averages[metric])}"
            f"  売上比: {format_percent(report.total_percent_of_sales(metric))}"
        )


def print_table(rows) -> None:
    if not rows:
        print("対象のデータがありません。")
        return
    for row in rows:
        totals = row.totals
        print(
            f"  {row.position:>3}. {totals.label:<30} 売上: {format_currency(totals.total_sales)}"
            f"  純利益: {format_currency(totals.total_profit)}"
            f"  利益率: {format_percent(totals.profit_percent_of_sales)}  {row.status}"
        )


def print_statistics(stats) -> None:
    if stats is None:
        print("対象のデータがありません。")
        return
    totals = stats.totals
    print(f"  レコード数: {stats.total_records}")
    print(f"  売上合計: {format_currency(totals.total_sales)}  平均: {format_currency(totals.average_sales)}")
    print(f"  純利益合計: {format_currency(totals.total_profit)}  平均: {format_currency(totals.average_profit)}")
    print(f"  売上最大月: {month_name(stats.best_month.month)}/{stats.best_month.year} "
          f"({stats.best_month.staff_name}, {format_currency(stats.best_month.sales)})")
    print(f"  売上最小月: {month_name(stats.worst_month.month)}/{stats.worst_month.year} "
          f"({stats.worst_month.staff_name}, {format_currency(stats.worst_month.sales)})")


def resolve_export_path(config: ConfigManager, path: Path) -> Path:
    """ファイル名だけが指定された場合は設定の出力フォルダに置く"""
    path = Path(path)
    if path.parent == Path('.'):
        return config.get_report_settings()['export_dir'] / path
    return path


def run_staff_command(dashboard: SalesDashboard, args) -> None:
    if args.action == 'add':
        member = dashboard.register_staff(args.name, phone=args.phone, hired_on=args.hired_on)
        print(f"担当者を登録しました: {member.id} ({member.name})")
    elif args.action == 'list':
        print_staff(dashboard)
    elif args.action == 'update':
        member = dashboard.update_staff(args.staff_id, name=args.name, phone=args.phone, hired_on=args.hired_on)
        print(f"担当者を更新しました: {member.id} ({member.name})")
    elif args.action == 'delete':
        dashboard.delete_staff(args.staff_id)
        print(f"担当者を削除しました: {args.staff_id}")


def run_record_command(dashboard: SalesDashboard, args) -> None:
    if args.action == 'add':
        record = dashboard.add_record(
            args.staff_id, args.month, args.year, args.sales,
            commission=args.commission, bonus=args.bonus, expenses=args.expenses
        )
        print(f"売上レコードを登録しました: {record.id} (純利益: {format_currency(record.net_profit)})")
    elif args.action == 'list':
        print_records(dashboard.list_records(year=args.year, staff_id=args.staff))
    elif args.action == 'delete':
        dashboard.delete_record(args.record_id)
        print(f"売上レコードを削除しました: {args.record_id}")


def run_config_command(config: ConfigManager, args) -> None:
    if args.action == 'show':
        for key, value in config.get_all_settings().items():
            print(f"  {key}: {value}")
    elif args.action == 'save':
        print(f"設定を保存しました: {config.save_config(args.path)}")


def run_command(dashboard: SalesDashboard, config: ConfigManager, args) -> int:
    """サブコマンドを実行し、終了コードを返す"""
    exporter = ReportExporter(logger=dashboard.logger.logger)

    if args.command == 'staff':
        run_staff_command(dashboard, args)

    elif args.command == 'record':
        run_record_command(dashboard, args)

    elif args.command == 'import':
        result = RecordImporter(dashboard).import_file(args.csv_file)
        print(f"取り込み: {result.imported}件  スキップ: {result.skipped}件")
        for error in result.errors:
            print(f"  - {error}")
        return 0 if result.success else 1

    elif args.command == 'ranking':
        metric = RankingMetric(args.metric)
        entries = dashboard.ranking(args.year, metric)
        print_ranking(entries, metric)
        if args.export:
            print(f"出力しました: {exporter.export_ranking(entries, resolve_export_path(config, args.export))}")

    elif args.command == 'leaders':
        for board, entry in dashboard.leaders(args.year).items():
            if entry is None:
                print(f"  {board}: -")
            else:
                print(f"  {board}: {entry.label} ({entry.metric_value:,.2f})")

    elif args.command == 'performance':
        report = dashboard.monthly_performance(args.staff_id, args.window)
        if report is None:
            print("対象のデータがありません。")
            return 0
        print_performance(report)
        if args.export:
            print(f"出力しました: {exporter.export_monthly_performance(report, resolve_export_path(config, args.export))}")

    elif args.command == 'table':
        rows = dashboard.general_table(args.year)
        print_table(rows)
        if args.export:
            print(f"出力しました: {exporter.export_general_table(rows, resolve_export_path(config, args.export))}")

    elif args.command == 'stats':
        print_statistics(dashboard.statistics(args.year, args.staff))

    elif args.command == 'config':
        run_config_command(config, args)

    return 0


def main(argv=None) -> int:
    """メイン関数"""
    args = parse_arguments(argv)
    error_handler = ErrorHandler()

    try:
        dashboard, config = build_dashboard(args)
        return run_command(dashboard, config, args)

    except SalesDashboardError as e:
        print(f"エラー: {error_handler.describe(e)}")
        return 1
    except KeyboardInterrupt:
        print("\n\n処理が中断されました。")
        return 1


if __name__ == '__main__':
    sys.exit(main())
