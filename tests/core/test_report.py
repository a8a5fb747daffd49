import unittest

from lockscope.core.report import AdvisoryId, Report
from lockscope.errors import ReportFormatError


def vulnerability_doc(advisory_id="RUSTSEC-2021-0003", name="smallvec", version="0.6.14", url=None):
    return {
        "advisory": {
            "id": advisory_id,
            "package": name,
            "title": "Buffer overflow in SmallVec::insert_many",
            "description": "A bug in insert_many can cause a buffer overflow.",
            "date": "2021-01-08",
            "aliases": ["CVE-2021-25900"],
            "url": url,
        },
        "versions": {"patched": [">= 0.6.14, < 1.0.0", ">= 1.6.1"], "unaffected": ["< 0.3.0"]},
        "package": {
            "name": name,
            "version": version,
            "source": "registry+https://github.com/rust-lang/crates.io-index",
            "checksum": None,
            "dependencies": [],
        },
    }


class TestAdvisoryId(unittest.TestCase):

    def test_known_schemes(self):
        self.assertEqual(
            AdvisoryId("RUSTSEC-2021-0003").url(),
            "https://rustsec.org/advisories/RUSTSEC-2021-0003.html",
        )
        self.assertEqual(
            AdvisoryId("CVE-2021-25900").url(),
            "https://cve.mitre.org/cgi-bin/cvename.cgi?name=CVE-2021-25900",
        )
        self.assertEqual(
            AdvisoryId("GHSA-4mmc-49vf-jmcp").url(),
            "https://github.com/advisories/GHSA-4mmc-49vf-jmcp",
        )
        self.assertEqual(
            AdvisoryId("TALOS-2017-0468").url(),
            "https://www.talosintelligence.com/reports/TALOS-2017-0468",
        )

    def test_placeholder_and_unknown_ids_have_no_url(self):
        self.assertIsNone(AdvisoryId("RUSTSEC-0000-0000").url())
        self.assertIsNone(AdvisoryId("INTERNAL-42").url())


class TestReport(unittest.TestCase):

    def test_from_dict_reads_vulnerabilities(self):
        report = Report.from_dict({
            "lockfile": {"dependency-count": 12},
            "vulnerabilities": {"found": True, "count": 1, "list": [vulnerability_doc()]},
            "warnings": [],
        })

        self.assertTrue(report.vulnerabilities.found)
        self.assertEqual(report.lockfile_dependency_count, 12)

        vuln = report.vulnerabilities.list[0]
        self.assertEqual(vuln.advisory.id.value, "RUSTSEC-2021-0003")
        self.assertEqual(vuln.package.release().version, "0.6.14")
        self.assertEqual(vuln.versions.patched, (">= 0.6.14, < 1.0.0", ">= 1.6.1"))
        self.assertEqual(vuln.advisory.aliases, ("CVE-2021-25900",))

    def test_to_dict_matches_input_document(self):
        doc = {
            "lockfile": {"dependency-count": 12},
            "vulnerabilities": {"found": True, "count": 1, "list": [vulnerability_doc()]},
            "warnings": [{"kind": "unmaintained", "package": "term", "message": "term is unmaintained", "url": None}],
        }

        self.assertEqual(Report.from_dict(doc).to_dict(), doc)

    def test_count_and_found_default_from_list(self):
        report = Report.from_dict({"vulnerabilities": {"list": [vulnerability_doc(), vulnerability_doc()]}})

        self.assertEqual(report.vulnerabilities.count, 2)
        self.assertTrue(report.vulnerabilities.found)

    def test_empty_report(self):
        report = Report.from_dict({})

        self.assertFalse(report.vulnerabilities.found)
        self.assertEqual(report.warnings, ())

    def test_warnings_grouped_by_kind(self):
        report = Report.from_dict({
            "warnings": {
                "unmaintained": [
                    {"package": {"name": "term", "version": "0.5.2"}, "advisory": {"title": "term is looking for a new maintainer"}},
                ],
                "yanked": [
                    {"package": {"name": "futures", "version": "0.3.0"}, "message": "yanked"},
                ],
            },
        })

        self.assertEqual([w.package for w in report.warnings], ["term", "futures"])
        self.assertEqual(report.warnings[0].kind, "unmaintained")
        self.assertEqual(report.warnings[0].message, "term is looking for a new maintainer")

    def test_missing_required_field(self):
        doc = vulnerability_doc()
        del doc["advisory"]["title"]

        with self.assertRaises(ReportFormatError):
            Report.from_dict({"vulnerabilities": {"list": [doc]}})

    def test_not_an_object(self):
        with self.assertRaises(ReportFormatError):
            Report.from_dict(["nope"])


CARGO_AUDIT_REPORT = {
    "database": {"advisory-count": 580, "last-commit": "4b8bd1a6", "last-updated": "2023-06-01T12:00:00+00:00"},
    "lockfile": {"dependency-count": 212},
    "settings": {"target_arch": None, "target_os": None, "severity": None, "ignore": [], "informational_warnings": ["unmaintained", "unsound", "yanked"]},
    "vulnerabilities": {
        "found": True,
        "count": 1,
        "list": [{
            "advisory": {
                "id": "RUSTSEC-2021-0003",
                "package": "smallvec",
                "title": "Buffer overflow in SmallVec::insert_many",
                "description": "A bug in insert_many can cause a buffer overflow.",
                "date": "2021-01-08",
                "aliases": ["CVE-2021-25900", "GHSA-43w2-9j62-hq99"],
                "related": [],
                "collection": "crates",
                "categories": ["memory-corruption"],
                "keywords": ["buffer-overflow", "heap-overflow"],
                "cvss": "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H",
                "informational": None,
                "references": ["https://github.com/servo/rust-smallvec/issues/252"],
                "source": None,
                "url": "https://github.com/servo/rust-smallvec/issues/252",
                "withdrawn": None,
            },
            "versions": {"patched": [">= 0.6.14, < 1.0.0", ">= 1.6.1"], "unaffected": ["< 0.3.0"]},
            "affected": {"arch": [], "os": [], "functions": {"smallvec::SmallVec::insert_many": ["< 0.6.14"]}},
            "package": {
                "name": "smallvec",
                "version": "0.6.13",
                "source": "registry+https://github.com/rust-lang/crates.io-index",
                "checksum": "f7b0758c52e15a8b5e3691eae6cc559f08eee9406e548a4477ba4e67770a82b6",
                "dependencies": ["maybe-uninit"],
                "replace": None,
            },
        }],
    },
    "warnings": {
        "unmaintained": [{
            "kind": "unmaintained",
            "package": {"name": "term", "version": "0.5.2", "source": "registry+https://github.com/rust-lang/crates.io-index"},
            "advisory": {
                "id": "RUSTSEC-2018-0015",
                "package": "term",
                "title": "term is looking for a new maintainer",
                "date": "2018-11-19",
                "informational": "unmaintained",
                "url": "https://github.com/Stebalien/term/issues/93",
            },
            "affected": None,
            "versions": None,
        }],
    },
}


class TestReportDocument(unittest.TestCase):

    def test_cargo_audit_report_written_back_unchanged(self):
        report = Report.from_dict(CARGO_AUDIT_REPORT)

        self.assertEqual(report.to_dict(), CARGO_AUDIT_REPORT)

    def test_cargo_audit_report_model(self):
        report = Report.from_dict(CARGO_AUDIT_REPORT)

        self.assertEqual(report.lockfile_dependency_count, 212)
        self.assertEqual(report.vulnerabilities.list[0].package.version, "0.6.13")

        [warning] = report.warnings
        self.assertEqual(warning.package, "term")
        self.assertEqual(warning.kind, "unmaintained")
        self.assertEqual(warning.message, "term is looking for a new maintainer")
        self.assertEqual(warning.url, "https://github.com/Stebalien/term/issues/93")

    def test_to_dict_is_a_copy(self):
        report = Report.from_dict(CARGO_AUDIT_REPORT)

        report.to_dict()["vulnerabilities"]["count"] = 99

        self.assertEqual(report.to_dict()["vulnerabilities"]["count"], 1)


class TestMalformedReport(unittest.TestCase):

    def assertRejected(self, doc):
        with self.assertRaises(ReportFormatError):
            Report.from_dict(doc)

    def test_package_not_an_object(self):
        doc = vulnerability_doc()
        doc["package"] = ["x"]

        self.assertRejected({"vulnerabilities": {"list": [doc]}})

    def test_advisory_not_an_object(self):
        doc = vulnerability_doc()
        doc["advisory"] = "RUSTSEC-2021-0003"

        self.assertRejected({"vulnerabilities": {"list": [doc]}})

    def test_non_string_title(self):
        doc = vulnerability_doc()
        doc["advisory"]["title"] = 5

        self.assertRejected({"vulnerabilities": {"list": [doc]}})

    def test_non_string_patched_version(self):
        doc = vulnerability_doc()
        doc["versions"]["patched"] = [1.2]

        self.assertRejected({"vulnerabilities": {"list": [doc]}})

    def test_non_numeric_count(self):
        self.assertRejected({"vulnerabilities": {"count": "abc", "list": []}})

    def test_non_boolean_found(self):
        self.assertRejected({"vulnerabilities": {"found": "yes", "list": []}})

    def test_list_not_an_array(self):
        self.assertRejected({"vulnerabilities": {"list": {"a": 1}}})

    def test_lockfile_not_an_object(self):
        self.assertRejected({"lockfile": 12})

    def test_warning_advisory_not_an_object(self):
        self.assertRejected({"warnings": [{"package": "term", "advisory": "unmaintained"}]})

    def test_warning_package_of_wrong_type(self):
        self.assertRejected({"warnings": [{"package": 3, "message": "x"}]})

    def test_warning_entry_not_an_object(self):
        self.assertRejected({"warnings": ["term"]})
