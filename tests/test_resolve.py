import io
import json

import pytest

from dispatch.error_response import DOCREF, UnsupportedErrorFormat
from dispatch.models import InvalidRevision, MissingRevision, TextDeletedRevision, UserDeletedRevision
from dispatch.resolve import RevisionsResolver

PAGE = {"pageid": 42, "ns": 0, "title": "Main Page"}


@pytest.fixture
def document():
    return {
        "revisions": [
            {"revid": 1000, "parentid": 999, "user": "Alice", "timestamp": "2023-03-01T12:00:00Z",
             "size": 2048, "comment": "copyedit", "tags": [], "page": PAGE, "diffsize": 12},
            {"revid": 1001, "parentid": 1000, "timestamp": "2023-03-01T13:00:00Z",
             "size": 4096, "comment": "expand", "tags": [], "page": PAGE, "diffsize": 2048, "texthidden": ""},
            {"revid": 1002, "parentid": 1001, "timestamp": "2023-03-01T14:00:00Z",
             "size": 4090, "comment": "", "tags": [], "page": PAGE, "diffsize": -6, "userhidden": True},
            {"revid": 5, "missing": True},
            {"revid": -1, "invalid": True},
        ],
        "logevents": [
            {"logid": 7, "params": {"type": "revision", "ids": [1001],
                                    "old": {"bitmask": 0}, "new": {"bitmask": 1}},
             "user": "Admin", "timestamp": "2023-03-02T08:00:00Z", "comment": "RD1", "tags": []},
        ],
    }


class test_resolve:
    def test_revisions(self, document):
        result = RevisionsResolver().resolve(document)
        revisions = result["revisions"]
        assert [r.revid for r in revisions] == [1000, 1001, 1002, 5, -1]
        assert type(revisions[1]) is TextDeletedRevision
        assert revisions[1].deleted.logid == 7
        assert type(revisions[2]) is UserDeletedRevision
        assert revisions[2].deleted is True
        assert isinstance(revisions[3], MissingRevision)
        assert isinstance(revisions[4], InvalidRevision)

    def test_errors(self, document):
        result = RevisionsResolver(errorformat="raw").resolve(document)
        assert result["docref"] == DOCREF
        assert [e["code"] for e in result["errors"]] == ["missingrevision", "invalidrevision"]
        assert result["errors"][0]["params"] == ["5"]
        assert result["errors"][1]["revid"] == -1

    def test_bc(self, document):
        result = RevisionsResolver(errorformat="bc").resolve(document)
        assert result["error"]["code"] == "missingrevision"
        assert "errors" not in result

    def test_no_errors(self, document):
        document["revisions"] = document["revisions"][:3]
        result = RevisionsResolver().resolve(document)
        assert set(result) == {"revisions"}

    def test_malformed(self, document):
        document["revisions"] = [{"revid": 3, "timestamp": "2023-03-01T12:00:00Z"}]
        result = RevisionsResolver().resolve(document)
        assert result["revisions"] == []
        assert result["errors"][0]["code"] == "badrevision"

    @pytest.mark.parametrize("logevent", [
        {"logid": 8, "params": {"type": "revision", "ids": [1001], "new": "x"},
         "timestamp": "2023-03-02T09:00:00Z"},
        {"logid": 8, "params": {"type": "revision", "ids": [1001], "new": {"bitmask": 1}}},
    ])
    def test_malformed_logevent(self, document, logevent):
        document["logevents"].append(logevent)
        result = RevisionsResolver(errorformat="raw").resolve(document)
        assert len(result["revisions"]) == 5
        assert result["revisions"][1].deleted.logid == 7
        assert result["errors"][0]["code"] == "badlogevent"
        assert result["errors"][0]["logid"] == 8

    def test_likely_cause(self, document):
        result = RevisionsResolver(likely_causes={1001}).resolve(document)
        assert result["revisions"][1].islikelycause is True

    def test_unsupported_errorformat(self):
        with pytest.raises(UnsupportedErrorFormat):
            RevisionsResolver(errorformat="html")


class test_run:
    def test_file(self, document, tmp_path, capsys):
        path = tmp_path / "input.json"
        path.write_text(json.dumps(document))
        RevisionsResolver(input_path=str(path)).run()
        output = json.loads(capsys.readouterr().out)
        assert output["revisions"][1]["texthidden"] is True
        assert output["revisions"][1]["deleted"]["logid"] == 7
        assert "user" not in output["revisions"][2]
        assert output["revisions"][3] == {"revid": 5, "missing": True}
        assert len(output["errors"]) == 2

    def test_stdin(self, document, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(document)))
        RevisionsResolver().run()
        output = json.loads(capsys.readouterr().out)
        assert len(output["revisions"]) == 5


class test_argparser:
    def test_defaults(self):
        import dispatch.config
        ap = dispatch.config.getArgParser()
        RevisionsResolver.set_argparser(ap)
        args = dispatch.config.parse_args(ap, cli_args=["--no-config"])
        resolver = RevisionsResolver.from_argparser(args)
        assert resolver.errorformat == "text"
        assert resolver.input_path == "-"
        assert resolver.likely_causes == set()

    def test_options(self, tmp_path):
        import dispatch.config
        path = tmp_path / "input.json"
        path.write_text("{}")
        ap = dispatch.config.getArgParser()
        RevisionsResolver.set_argparser(ap)
        args = dispatch.config.parse_args(ap, cli_args=[
            "--no-config", "--errorformat", "bc", "--input", str(path), "--likely-cause", "1", "2", "--indent", "2",
        ])
        resolver = RevisionsResolver.from_argparser(args)
        assert resolver.errorformat == "bc"
        assert resolver.input_path == str(path)
        assert resolver.likely_causes == {1, 2}
        assert resolver.indent == 2
