#!/usr/bin/env python3

"""
Unit tests for configuration management.

Tests the configuration loading, validation, and environment
variable handling functionality.
"""

import unittest
import tempfile
import os
import json
import sys

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from gene_dataset_pipeline.core.config import PipelineConfig, load_config
from gene_dataset_pipeline.core.exceptions import ConfigurationError


class TestPipelineConfig(unittest.TestCase):
    """Test PipelineConfig class."""

    def test_default_config(self):
        """Test default configuration values."""
        config = PipelineConfig()

        self.assertEqual(config.code_type, 'simple')
        self.assertEqual(config.exporter, 'nfa')
        self.assertEqual(config.line_width, 60)
        self.assertEqual(config.memory_limit_mb, 4096)
        self.assertTrue(config.enable_memory_monitoring)
        self.assertFalse(config.write_log_file)
        self.assertFalse(config.debug_mode)

    def test_config_validation(self):
        """Test configuration validation."""
        config = PipelineConfig()
        config.validate()  # Should not raise

        with self.assertRaises(ConfigurationError):
            PipelineConfig(code_type='binary')

        with self.assertRaises(ConfigurationError):
            PipelineConfig(line_width=0)

        with self.assertRaises(ConfigurationError):
            PipelineConfig(exporter='')

        with self.assertRaises(ConfigurationError):
            PipelineConfig(memory_limit_mb=50)

    def test_config_from_dict(self):
        """Test creating config from dictionary."""
        config_dict = {
            "code_type": "complete",
            "line_width": 80,
            "debug_mode": True,
            "unknown_key": "ignored"  # Should be filtered out
        }

        config = PipelineConfig.from_dict(config_dict)

        self.assertEqual(config.code_type, 'complete')
        self.assertEqual(config.line_width, 80)
        self.assertTrue(config.debug_mode)
        # Default values for unspecified parameters
        self.assertEqual(config.exporter, 'nfa')

    def test_config_to_dict(self):
        """Test converting config to dictionary."""
        config = PipelineConfig(line_width=70, debug_mode=True)
        config_dict = config.to_dict()

        self.assertIsInstance(config_dict, dict)
        self.assertEqual(config_dict["line_width"], 70)
        self.assertTrue(config_dict["debug_mode"])
        self.assertIn("code_type", config_dict)

    def test_config_from_json_file(self):
        """Test loading config from JSON file."""
        config_data = {
            "code_type": "extended",
            "line_width": 50,
            "debug_mode": True
        }

        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump(config_data, f)
            config_path = f.name

        try:
            config = PipelineConfig.from_file(config_path)

            self.assertEqual(config.code_type, 'extended')
            self.assertEqual(config.line_width, 50)
            self.assertTrue(config.debug_mode)
            self.assertEqual(config.memory_limit_mb, 4096)
        finally:
            os.unlink(config_path)

    def test_config_from_yaml_file(self):
        """Test loading config from YAML file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("code_type: complete\nline_width: 72\n")
            config_path = f.name

        try:
            config = PipelineConfig.from_file(config_path)

            self.assertEqual(config.code_type, 'complete')
            self.assertEqual(config.line_width, 72)
        finally:
            os.unlink(config_path)

    def test_config_from_nonexistent_file(self):
        """Test error handling for nonexistent config file."""
        with self.assertRaises(ConfigurationError):
            PipelineConfig.from_file("/nonexistent/config.json")

    def test_config_from_invalid_json(self):
        """Test error handling for invalid JSON."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            f.write("{ invalid json }")
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_file(config_path)
        finally:
            os.unlink(config_path)

    def test_config_from_invalid_value_in_file(self):
        """Values in a file are validated too."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"line_width": -5}, f)
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_file(config_path)
        finally:
            os.unlink(config_path)

    def test_config_save_to_file(self):
        """Test saving config to file."""
        config = PipelineConfig(line_width=40, debug_mode=True)

        for suffix in ('.json', '.yml'):
            with tempfile.NamedTemporaryFile(mode='w', suffix=suffix, delete=False) as f:
                config_path = f.name

            try:
                config.save_to_file(config_path)

                loaded_config = PipelineConfig.from_file(config_path)
                self.assertEqual(loaded_config.line_width, 40)
                self.assertTrue(loaded_config.debug_mode)
            finally:
                if os.path.exists(config_path):
                    os.unlink(config_path)

    def test_config_from_env(self):
        """Test loading config from environment variables."""
        env_vars = {
            'GENEDS_CODE_TYPE': 'extended',
            'GENEDS_LINE_WIDTH': '70',
            'GENEDS_MEMORY_LIMIT_MB': '2048',
            'GENEDS_DEBUG_MODE': 'true'
        }

        original_env = {}
        for key in env_vars:
            original_env[key] = os.environ.get(key)
            os.environ[key] = env_vars[key]

        try:
            config = PipelineConfig.from_env()

            self.assertEqual(config.code_type, 'extended')
            self.assertEqual(config.line_width, 70)
            self.assertEqual(config.memory_limit_mb, 2048)
            self.assertTrue(config.debug_mode)
            self.assertEqual(config.exporter, 'nfa')

        finally:
            for key, value in original_env.items():
                if value is None:
                    if key in os.environ:
                        del os.environ[key]
                else:
                    os.environ[key] = value

    def test_config_from_env_invalid_values(self):
        """Test error handling for invalid environment values."""
        os.environ['GENEDS_LINE_WIDTH'] = 'invalid'

        try:
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_env()
        finally:
            if 'GENEDS_LINE_WIDTH' in os.environ:
                del os.environ['GENEDS_LINE_WIDTH']


class TestLoadConfig(unittest.TestCase):
    """Test the load_config function."""

    def test_load_default_config(self):
        """Test loading default configuration."""
        config = load_config(use_env=False)

        self.assertEqual(config.line_width, 60)
        self.assertEqual(config.code_type, 'simple')

    def test_load_config_priority(self):
        """Test configuration loading priority: file > env > defaults."""
        os.environ['GENEDS_LINE_WIDTH'] = '70'

        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"line_width": 50}, f)
            config_path = f.name

        try:
            config = load_config(config_path=config_path, use_env=True)

            # File should override environment
            self.assertEqual(config.line_width, 50)

        finally:
            os.unlink(config_path)
            if 'GENEDS_LINE_WIDTH' in os.environ:
                del os.environ['GENEDS_LINE_WIDTH']

    def test_load_config_file_keeps_other_env_values(self):
        """Environment values survive a file that does not set them."""
        os.environ['GENEDS_CODE_TYPE'] = 'extended'

        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"line_width": 50}, f)
            config_path = f.name

        try:
            config = load_config(config_path=config_path, use_env=True)

            self.assertEqual(config.line_width, 50)
            self.assertEqual(config.code_type, 'extended')
        finally:
            os.unlink(config_path)
            del os.environ['GENEDS_CODE_TYPE']

    def test_load_config_env_over_defaults(self):
        os.environ['GENEDS_CODE_TYPE'] = 'complete'

        try:
            self.assertEqual(load_config(use_env=True).code_type, 'complete')
        finally:
            del os.environ['GENEDS_CODE_TYPE']

    def test_load_config_no_env(self):
        """Test loading config without environment variables."""
        os.environ['GENEDS_LINE_WIDTH'] = '70'

        try:
            config = load_config(use_env=False)

            # Should use default, not environment
            self.assertEqual(config.line_width, 60)

        finally:
            if 'GENEDS_LINE_WIDTH' in os.environ:
                del os.environ['GENEDS_LINE_WIDTH']


if __name__ == '__main__':
    unittest.main()
