"""Tests for certificate materialization."""

import os

import pytest

from nginx_lb.certmanager import CertificateMaterializer
from nginx_lb.shared.errors import CertificateWriteError
from nginx_lb.shared.utils import checksum

from conftest import TEST_PEM


class TestCertificateMaterializer:
    """Test writing certificates keyed by hostname."""

    def test_write_unescapes_newlines(self, materializer, certs_dir):
        record = materializer.write("api.example.com", TEST_PEM)

        path = certs_dir / "api.example.com.crt"
        content = path.read_text()
        assert "\\n" not in content
        assert content.splitlines() == [
            "-----BEGIN CERTIFICATE-----",
            "MIIBtest",
            "-----END CERTIFICATE-----",
        ]
        assert record.path == str(path)
        assert record.fingerprint == checksum(content)

    def test_write_overwrites_previous_content(self, materializer, certs_dir):
        materializer.write("api.example.com", "old")
        materializer.write("api.example.com", "new")

        assert (certs_dir / "api.example.com.crt").read_text() == "new"

    def test_dry_run_does_not_write(self, certs_dir):
        materializer = CertificateMaterializer(str(certs_dir), dry_run=True)

        record = materializer.write("api.example.com", TEST_PEM)

        assert not (certs_dir / "api.example.com.crt").exists()
        assert record.hostname == "api.example.com"

    def test_ensure_directory_creates_missing_dir(self, tmp_path):
        target = tmp_path / "nested" / "certs"
        CertificateMaterializer(str(target)).ensure_directory()
        assert target.is_dir()

    @pytest.mark.parametrize("hostname", ["", "..", "../etc/passwd", "a/b"])
    def test_rejects_unsafe_hostnames(self, materializer, hostname):
        with pytest.raises(CertificateWriteError):
            materializer.write(hostname, TEST_PEM)

    def test_write_failure_raises(self, tmp_path):
        """Writing into a missing directory is a hard failure."""
        materializer = CertificateMaterializer(str(tmp_path / "missing"))

        with pytest.raises(CertificateWriteError) as exc_info:
            materializer.write("api.example.com", TEST_PEM)

        assert exc_info.value.hostname == "api.example.com"

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_read_only_directory_raises(self, certs_dir):
        certs_dir.chmod(0o500)
        try:
            with pytest.raises(CertificateWriteError):
                CertificateMaterializer(str(certs_dir)).write("api.example.com", TEST_PEM)
        finally:
            certs_dir.chmod(0o700)

    def test_identical_content_is_not_rewritten(self, materializer, certs_dir):
        materializer.write("api.example.com", TEST_PEM)
        path = certs_dir / "api.example.com.crt"
        mtime = path.stat().st_mtime_ns

        materializer.write("api.example.com", TEST_PEM)

        assert path.stat().st_mtime_ns == mtime
