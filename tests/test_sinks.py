"""Tests for audit sinks."""

import json
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from loan_wallet.config import AuditConfig, KafkaConfig, LoanWalletConfig, OutputConfig
from loan_wallet.exceptions import ConfigurationError, SinkError
from loan_wallet.models import AmortizationStatement, ComponentAllocation, ComponentKind
from loan_wallet.sinks import ConsoleSink, JsonFileSink, create_sink
from loan_wallet.sinks.serialization import statement_event


@pytest.fixture
def statement() -> AmortizationStatement:
    """A settled 100.00 installment paid with 100.00."""
    return AmortizationStatement(
        amount_paid=Decimal("100.00"),
        policy_name="penalty_first",
        allocations=(
            ComponentAllocation(
                ComponentKind.PRINCIPAL, Decimal("100.00"), Decimal("100.00"), Decimal("0.00")
            ),
        ),
        total_applied=Decimal("100.00"),
        unused_amount=Decimal("0.00"),
        transaction_id="txn-001",
    )


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_init_default(self) -> None:
        """Test default initialization."""
        sink = ConsoleSink()

        assert sink.pretty is True
        assert sink.max_records is None
        assert sink._counts == {}

    def test_send(self, capsys: pytest.CaptureFixture, statement: AmortizationStatement) -> None:
        """Test sending a single statement."""
        sink = ConsoleSink(pretty=False)

        sink.send("dev.wallet.amortizations", statement)
        captured = capsys.readouterr()

        assert captured.out.startswith("[dev.wallet.amortizations] ")
        assert '"transaction_id": "txn-001"' in captured.out
        assert sink._counts["dev.wallet.amortizations"] == 1

    def test_write_batch_events(
        self, capsys: pytest.CaptureFixture, statement: AmortizationStatement
    ) -> None:
        """Test writing a batch of statement events."""
        sink = ConsoleSink(pretty=True)

        sink.write_batch("amortizations", [statement_event(statement, "wallet-001")])
        captured = capsys.readouterr()

        assert "Entity: amortizations (1 records)" in captured.out
        assert "wallet-001" in captured.out

    def test_write_batch_with_max_records(self, capsys: pytest.CaptureFixture) -> None:
        """Test writing batch with max_records limit."""
        sink = ConsoleSink(max_records=2)

        sink.write_batch("test_entity", [{"id": i} for i in range(10)])
        captured = capsys.readouterr()

        assert "10 records" in captured.out
        assert "and 8 more records" in captured.out

    def test_write_batch_accumulates_count(self) -> None:
        """Test that multiple batches accumulate count."""
        sink = ConsoleSink(pretty=False)

        sink.write_batch("test", [{"id": 1}])
        sink.write_batch("test", [{"id": 2}, {"id": 3}])

        assert sink._counts["test"] == 3

    def test_close(self, capsys: pytest.CaptureFixture) -> None:
        """Test close method prints summary."""
        sink = ConsoleSink()
        sink._counts = {"amortizations": 10}

        sink.close()
        captured = capsys.readouterr()

        assert "Console Sink Summary" in captured.out
        assert "amortizations: 10 records" in captured.out


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_init_creates_directory(self, tmp_path: Path) -> None:
        """Test that init creates output directory."""
        output_dir = tmp_path / "new_subdir"
        sink = JsonFileSink(output_dir)

        assert output_dir.exists()
        assert sink.pretty is False

    def test_init_failure(self, tmp_path: Path) -> None:
        """Test an unusable output directory raises SinkError."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(SinkError):
            JsonFileSink(blocker / "sub")

    def test_write_batch(self, tmp_path: Path, statement: AmortizationStatement) -> None:
        """Test writing batch to JSON file."""
        sink = JsonFileSink(tmp_path)

        sink.write_batch("amortizations", [statement])

        data = json.loads((tmp_path / "amortizations.json").read_text())
        assert len(data) == 1
        assert data[0]["transaction_id"] == "txn-001"
        assert data[0]["allocations"][0]["amount_applied"] == "100.00"
        assert sink._counts["amortizations"] == 1

    def test_write_batch_pretty(self, tmp_path: Path) -> None:
        """Test writing batch with pretty printing."""
        sink = JsonFileSink(tmp_path, pretty=True)

        sink.write_batch("test", [{"id": 1}])

        assert "\n" in (tmp_path / "test.json").read_text()

    def test_send_appends_json_lines(self, tmp_path: Path, statement: AmortizationStatement) -> None:
        """Test send appends one line per record to the topic file."""
        sink = JsonFileSink(tmp_path)

        sink.send("dev.wallet.amortizations", statement)
        sink.send("dev.wallet.amortizations", statement_event(statement, "wallet-001"))

        lines = (tmp_path / "dev_wallet_amortizations.jsonl").read_text().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["subject"] == "wallet-001"
        assert sink._counts["dev.wallet.amortizations"] == 2

    def test_close(self, tmp_path: Path) -> None:
        """Test close logs without error."""
        sink = JsonFileSink(tmp_path)
        sink.write_batch("test", [{"id": 1}])

        sink.close()


class TestKafkaSinkMocked:
    """Tests for KafkaSink with a mocked producer."""

    def test_producer_stats(self) -> None:
        """Test ProducerStats rates."""
        from loan_wallet.sinks.kafka import ProducerStats

        stats = ProducerStats(sent=100, delivered=90, failed=10, start_time=0.0, end_time=10.0)

        assert stats.success_rate == 0.9
        assert stats.throughput == 10.0
        assert ProducerStats().success_rate == 0.0
        assert ProducerStats(sent=1, start_time=5.0, end_time=5.0).throughput == 0.0

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_init_with_string(self, mock_producer_class: MagicMock) -> None:
        """Test KafkaSink initialization with string."""
        from loan_wallet.sinks.kafka import KafkaSink

        sink = KafkaSink("kafka:9092")

        assert sink.config.bootstrap_servers == "kafka:9092"
        mock_producer_class.assert_called_once_with(KafkaConfig(bootstrap_servers="kafka:9092").to_dict())

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_send_event_keyed_by_wallet(
        self, mock_producer_class: MagicMock, statement: AmortizationStatement
    ) -> None:
        """Test events are keyed by wallet id."""
        from loan_wallet.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink(KafkaConfig())
        sink.send("dev.wallet.amortizations", statement_event(statement, "wallet-001"))

        call_kwargs = mock_producer.produce.call_args[1]
        assert call_kwargs["topic"] == "dev.wallet.amortizations"
        assert call_kwargs["key"] == b"wallet-001"
        assert json.loads(call_kwargs["value"])["data"]["transaction_id"] == "txn-001"
        assert sink.stats.sent == 1

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_send_statement_keyed_by_transaction(
        self, mock_producer_class: MagicMock, statement: AmortizationStatement
    ) -> None:
        """Test bare statements are keyed by transaction id."""
        from loan_wallet.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.send("topic", statement)

        assert mock_producer.produce.call_args[1]["key"] == b"txn-001"

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_send_without_key(self, mock_producer_class: MagicMock) -> None:
        """Test sending a record with no natural key."""
        from loan_wallet.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.send("topic", {"id": 1})

        assert mock_producer.produce.call_args[1]["key"] is None

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_write_batch(self, mock_producer_class: MagicMock) -> None:
        """Test writing a batch of records."""
        from loan_wallet.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.flush.return_value = 0
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.write_batch("topic", [{"subject": f"wallet-{i}"} for i in range(10)])

        assert mock_producer.produce.call_count == 10
        mock_producer.flush.assert_called_once()

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_delivery_callback(self, mock_producer_class: MagicMock) -> None:
        """Test delivery callback counts successes and failures."""
        from loan_wallet.sinks.kafka import KafkaSink

        sink = KafkaSink("localhost:9092")
        mock_msg = MagicMock()
        mock_msg.topic.return_value = "topic"
        mock_msg.partition.return_value = 0
        mock_msg.offset.return_value = 1

        sink._delivery_callback(None, mock_msg)
        sink._delivery_callback("Connection error", None)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_close(self, mock_producer_class: MagicMock) -> None:
        """Test close flushes and stamps the end time."""
        from loan_wallet.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.flush.return_value = 0
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.close()

        mock_producer.flush.assert_called_once_with(30.0)
        assert sink.stats.end_time is not None

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_producer_creation_failure(self, mock_producer_class: MagicMock) -> None:
        """Test producer errors surface as SinkError."""
        from confluent_kafka import KafkaException

        from loan_wallet.sinks.kafka import KafkaSink

        mock_producer_class.side_effect = KafkaException("broker down")

        with pytest.raises(SinkError):
            KafkaSink("localhost:9092")


class TestCreateSink:
    """Tests for create_sink."""

    def test_console(self) -> None:
        """Test the default sink is the console."""
        assert isinstance(create_sink(LoanWalletConfig()), ConsoleSink)

    def test_json(self, tmp_path: Path) -> None:
        """Test the JSON sink writes to the configured directory."""
        config = LoanWalletConfig(
            output=OutputConfig(json_output_dir=tmp_path / "audit"),
            audit=AuditConfig(sink="json"),
        )

        sink = create_sink(config)

        assert isinstance(sink, JsonFileSink)
        assert sink.output_dir == tmp_path / "audit"

    @patch("loan_wallet.sinks.kafka.Producer")
    def test_kafka(self, mock_producer_class: MagicMock) -> None:
        """Test the Kafka sink uses the Kafka settings."""
        from loan_wallet.sinks.kafka import KafkaSink

        config = LoanWalletConfig(
            kafka=KafkaConfig(bootstrap_servers="kafka:9092"),
            audit=AuditConfig(sink="kafka"),
        )

        sink = create_sink(config)

        assert isinstance(sink, KafkaSink)
        assert sink.config.bootstrap_servers == "kafka:9092"

    def test_unknown(self) -> None:
        """Test unknown sinks raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="postgres"):
            create_sink(LoanWalletConfig(audit=AuditConfig(sink="postgres")))
