"""Pytest configuration and fixtures."""


import base64

import pytest


@pytest.fixture
def sample_go_mod():
    """Sample go.mod content for testing."""
    return """module github.com/acme/widget

go 1.21

require (
	github.com/spf13/cobra v1.7.0
	golang.org/x/text v0.9.0 // indirect
)
"""


@pytest.fixture
def sample_go_list_output():
    """Sample `go list -m -u -json all` output for testing."""
    return b"""{
	"Path": "github.com/acme/widget",
	"Main": true,
	"Dir": "/tmp/repo-1234",
	"GoMod": "/tmp/repo-1234/go.mod",
	"GoVersion": "1.21"
}
{
	"Path": "github.com/spf13/cobra",
	"Version": "v1.7.0",
	"Update": {
		"Path": "github.com/spf13/cobra",
		"Version": "v1.8.0",
		"Time": "2023-11-04T23:25:14Z"
	},
	"Time": "2023-04-10T18:56:26Z"
}
{
	"Path": "github.com/spf13/pflag",
	"Version": "v1.0.5",
	"Time": "2019-09-18T20:23:24Z",
	"Indirect": true
}
{
	"Path": "golang.org/x/text",
	"Version": "v0.9.0",
	"Update": {
		"Path": "golang.org/x/text",
		"Version": "v0.14.0",
		"Time": "2023-10-11T21:31:25Z"
	},
	"Indirect": true
}
"""


@pytest.fixture
def github_contents_payload():
    """Build a GitHub contents API response body for raw file content."""
    def build(content: bytes) -> dict:
        encoded = base64.encodebytes(content).decode()
        return {"type": "file", "encoding": "base64", "content": encoded}

    return build
