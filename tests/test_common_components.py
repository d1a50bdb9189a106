"""
共通コンポーネントの統合テスト
"""
import json
import logging
import unittest
import tempfile
import openpyxl
import pandas as pd
from datetime import datetime, timedelta
from pathlib import Path
import sys

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from common import (
    CSVHandler,
    ExcelHandler,
    UnifiedLogger,
    ErrorHandler,
    ConfigManager,
    EncodingDetector,
    ImportResult,
    ConfigurationError,
    DataValidationError,
    DuplicatePeriodError,
    FileProcessingError,
    EncodingDetectionError,
    SalesDashboardError
)


class TestCommonComponents(unittest.TestCase):
    """共通コンポーネントの統合テスト"""

    def setUp(self):
        """テスト前の準備"""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.logger = UnifiedLogger("test_logger", level="WARNING")
        self.error_handler = ErrorHandler(self.logger.logger)
        self.csv_handler = CSVHandler(self.logger.logger, self.error_handler)
        self.excel_handler = ExcelHandler(self.logger.logger, self.error_handler)
        self.encoding_detector = EncodingDetector(self.logger.logger)

    def tearDown(self):
        """テスト後のクリーンアップ"""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_csv_handler_with_utf8(self):
        """UTF-8エンコーディングのCSVファイル処理テスト"""
        test_data = pd.DataFrame({
            'staff_name': ['Ana', 'João', 'Márcia'],
            'month': ['01', '02', '03'],
            'sales': [100.5, 200.0, 300.25]
        })

        csv_file = self.temp_dir / "test_utf8.csv"
        test_data.to_csv(csv_file, index=False, encoding='utf-8')

        df = self.csv_handler.read_csv_with_encoding_detection(csv_file)

        self.assertEqual(len(df), 3)
        self.assertEqual(len(df.columns), 3)
        self.assertIn('João', df['staff_name'].values)
        # 先頭ゼロは文字列のまま保持される
        self.assertEqual(list(df['month']), ['01', '02', '03'])

    def test_csv_handler_with_bom(self):
        """BOM付きUTF-8のCSVファイル処理テスト"""
        csv_file = self.temp_dir / "test_bom.csv"
        csv_file.write_text("staff_name,sales\nAna,10\n", encoding='utf-8-sig')

        self.assertEqual(self.encoding_detector.detect_encoding(csv_file), 'utf-8-sig')
        df = self.csv_handler.read_csv_with_encoding_detection(csv_file)
        self.assertEqual(list(df.columns), ['staff_name', 'sales'])

    def test_csv_handler_with_cp1252(self):
        """表計算ソフトから書き出されたcp1252のCSVファイル処理テスト"""
        test_data = pd.DataFrame({
            'Setorista': ['Conceição', 'Sebastião', 'Luís'],
            'Vendas': [1000, 2000, 3000]
        })

        csv_file = self.temp_dir / "test_cp1252.csv"
        test_data.to_csv(csv_file, index=False, encoding='cp1252')

        df = self.csv_handler.read_csv_with_encoding_detection(csv_file)
        self.assertEqual(len(df), 3)
        self.assertEqual(list(df['Vendas']), ['1000', '2000', '3000'])

    def test_normalize_and_validate_columns(self):
        df = pd.DataFrame({' Staff Name ': ['Ana'], 'Month': ['01'], 'Year': ['2024'], 'Sales': ['1']})
        df = self.csv_handler.normalize_columns(df)
        self.assertEqual(list(df.columns), ['staff_name', 'month', 'year', 'sales'])

        self.assertTrue(self.csv_handler.validate_csv_structure(
            df, required_column_names=['month', 'year'], any_of_column_names=['staff_id', 'staff_name']))
        self.assertFalse(self.csv_handler.validate_csv_structure(df, required_column_names=['bonus']))
        self.assertFalse(self.csv_handler.validate_csv_structure(df, any_of_column_names=['staff_id']))
        self.assertFalse(self.csv_handler.validate_csv_structure(df.iloc[0:0]))

    def test_excel_handler_basic(self):
        """基本的なExcelファイル書き出しテスト"""
        test_data = pd.DataFrame({
            'Setorista': ['Ana', 'Bruno'],
            'Vendas': [100, 200]
        })

        excel_file = self.temp_dir / "nested" / "test.xlsx"
        self.excel_handler.write_sheets(excel_file, {'Dados': test_data, 'Copia': test_data},
                                        titles={'Copia': 'Título'})

        workbook = openpyxl.load_workbook(excel_file)
        self.assertEqual(workbook.sheetnames, ['Dados', 'Copia'])
        self.assertEqual(workbook['Copia'].cell(row=1, column=1).value, 'Título')
        self.assertTrue(workbook['Dados'].cell(row=1, column=1).font.bold)

        df = pd.read_excel(excel_file, sheet_name='Dados')
        self.assertEqual(len(df), 2)
        self.assertEqual(list(df.columns), ['Setorista', 'Vendas'])

    def test_excel_handler_unwritable_path(self):
        blocker = self.temp_dir / "blocker"
        blocker.write_text("x", encoding='utf-8')
        with self.assertRaises(FileProcessingError):
            self.excel_handler.write_sheets(blocker / "out.xlsx", {'Dados': pd.DataFrame({'a': [1]})})

    def test_import_result_model(self):
        """ImportResultデータモデルのテスト"""
        result = ImportResult(file_name="vendas.csv", processing_start=datetime(2024, 1, 1, 12, 0, 0))
        result.add_imported("r1")
        result.add_imported("r2")
        result.add_skipped(4, "月コードが無効です: 13")
        result.processing_end = result.processing_start + timedelta(seconds=2)

        self.assertTrue(result.success)
        self.assertEqual(result.imported, 2)
        self.assertEqual(result.record_ids, ["r1", "r2"])
        self.assertEqual(result.errors, ["4行目: 月コードが無効です: 13"])
        self.assertEqual(result.processing_duration, 2.0)

        result.add_error("読み込み失敗")
        summary = result.to_dict()
        self.assertFalse(summary['success'])
        self.assertEqual(summary['errors_count'], 2)

    def test_config_manager_defaults(self):
        """ConfigManagerのデフォルト設定テスト"""
        missing = self.temp_dir / "none.json"
        missing.write_text("{}", encoding='utf-8')
        config_manager = ConfigManager(missing)

        self.assertEqual(config_manager.get_group_by(), 'staff_id')
        storage = config_manager.get_storage_settings()
        self.assertEqual(storage['store_path'], Path('data/sales_dashboard.json'))
        self.assertEqual(storage['encoding'], 'utf-8')

        report = config_manager.get_report_settings()
        self.assertEqual(report['performance_window'], 6)
        self.assertEqual(report['export_dir'], Path('exports'))

        logging_settings = config_manager.get_logging_settings()
        self.assertEqual(logging_settings['log_level'], 'INFO')
        self.assertTrue(config_manager.validate_configuration())

    def test_config_manager_file_and_validation(self):
        config_file = self.temp_dir / "sales_dashboard_config.json"
        config_file.write_text(json.dumps({'group_by': 'nome', 'log_file': None}), encoding='utf-8')

        config_manager = ConfigManager(config_file)
        self.assertIsNone(config_manager.get_logging_settings()['log_file'])
        with self.assertRaises(ConfigurationError):
            config_manager.validate_configuration()

        config_manager.update_config({'group_by': 'name', 'performance_window': 0})
        with self.assertRaises(ConfigurationError):
            config_manager.validate_configuration()

        config_manager.update_config({'performance_window': 3})
        self.assertTrue(config_manager.validate_configuration())

        saved = self.temp_dir / "saved.json"
        config_manager.save_config(saved)
        self.assertEqual(ConfigManager(saved).get_report_settings()['performance_window'], 3)

    def test_config_manager_invalid_file(self):
        broken = self.temp_dir / "broken.json"
        broken.write_text("{broken", encoding='utf-8')
        with self.assertRaises(ConfigurationError):
            ConfigManager(broken)

    def test_encoding_detector(self):
        """EncodingDetectorのテスト"""
        utf8_file = self.temp_dir / "test_utf8.txt"
        with open(utf8_file, 'w', encoding='utf-8') as f:
            f.write("staff_name,sales\nAna,10\n")

        self.assertEqual(self.encoding_detector.detect_encoding(utf8_file), 'utf-8')
        self.assertIn(self.encoding_detector.try_encodings(utf8_file), EncodingDetector.DEFAULT_ENCODINGS)
        self.assertFalse(self.encoding_detector.validate_encoding(utf8_file, 'no-such-codec'))

        with self.assertRaises(EncodingDetectionError):
            self.encoding_detector.detect_encoding(self.temp_dir / "missing.txt")

    def test_error_handler(self):
        """ErrorHandlerのテスト"""
        test_file = self.temp_dir / "test_error.csv"
        test_error = FileProcessingError("テストエラー")

        with self.assertLogs(self.logger.logger, level='ERROR'):
            self.error_handler.handle_file_processing_error(test_error, test_file)

        with self.assertLogs(self.logger.logger, level='WARNING') as captured:
            self.error_handler.log_skipped_row("vendas.csv", 3, "月コードが無効です: 13")
        self.assertIn("vendas.csv 3行目", captured.output[0])

        with self.assertLogs(self.logger.logger, level='WARNING'):
            context = self.error_handler.handle_validation_error(DataValidationError("氏名は必須です"), "担当者登録")
        self.assertEqual(context['error_type'], 'DataValidationError')
        self.assertEqual(context['operation'], '担当者登録')

    def test_reject_logs_then_raises(self):
        error = DuplicatePeriodError("s1", "01", "2024")
        with self.assertRaises(DuplicatePeriodError):
            with self.assertLogs(self.logger.logger, level='WARNING') as captured:
                self.error_handler.reject(error, "売上登録")
        self.assertIn("売上登録", captured.output[0])

    def test_describe(self):
        self.assertEqual(self.error_handler.describe(DataValidationError("x")), "DataValidationError: x")
        self.assertEqual(self.error_handler.describe(None), "")

    def test_exception_hierarchy(self):
        self.assertTrue(issubclass(DuplicatePeriodError, DataValidationError))
        for error_class in (DataValidationError, ConfigurationError, FileProcessingError, EncodingDetectionError):
            self.assertTrue(issubclass(error_class, SalesDashboardError))

    def test_unified_logger(self):
        """UnifiedLoggerのテスト"""
        log_file = self.temp_dir / "logs" / "test.log"
        logger = UnifiedLogger("test_file_logger", level="DEBUG", log_file=log_file)

        logger.info("テスト情報メッセージ")
        logger.log_record_operation("登録", "担当者", "s1", True)
        logger.log_record_operation("登録", "売上", "r1", False)
        logger.log_import_summary("vendas.csv", 3, 1, 0)
        logger.log_configuration_info({'store_path': 'data/x.json', 'api_token': 'abc'})
        logger.log_data_statistics({'total_sales': 1234.5, 'total_records': 3})

        for handler in logger.logger.handlers:
            handler.flush()
        content = log_file.read_text(encoding='utf-8')
        self.assertIn("担当者操作 [登録] 成功: s1", content)
        self.assertIn("売上操作 [登録] 拒否: r1", content)
        self.assertIn("成功率: 75.0%", content)
        self.assertIn("api_token: ***", content)
        self.assertNotIn("abc", content)
        self.assertIn("total_sales: 1,234.50", content)

        for handler in list(logger.logger.handlers):
            handler.close()
            logger.logger.removeHandler(handler)


class TestIntegrationScenarios(unittest.TestCase):
    """統合シナリオのテスト"""

    def setUp(self):
        """テスト前の準備"""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.logger = UnifiedLogger("integration_test", level="WARNING")
        self.error_handler = ErrorHandler(self.logger.logger)
        self.csv_handler = CSVHandler(self.logger.logger, self.error_handler)

    def tearDown(self):
        """テスト後のクリーンアップ"""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_file_processing_error_handling(self):
        """ファイル処理エラーハンドリングの統合テスト"""
        non_existent_file = self.temp_dir / "non_existent.csv"

        with self.assertLogs(self.logger.logger, level=logging.ERROR):
            with self.assertRaises(FileProcessingError):
                self.csv_handler.read_csv_with_encoding_detection(non_existent_file)


if __name__ == '__main__':
    unittest.main()
