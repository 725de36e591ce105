"""
Tests for content_validate — CSV, CRD and kind checks over loaded objects.

Pure unit tests: dicts → ManifestObject → validate_content.
"""

from __future__ import annotations

import copy

import pytest

from bundle_validator.core.errors import (
    ClusterServiceVersionError,
    CustomResourceDefinitionError,
    ManifestDecodeError,
    UnsupportedKindError,
)
from bundle_validator.core.models.manifest import ManifestObject
from bundle_validator.core.services.content_validate import validate_content


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════


def _obj(doc: dict, source: str = "test.yaml") -> ManifestObject:
    return ManifestObject.from_document(doc, source=source)


def _csv(name: str = "demo.v1.0.0", owned: list[tuple[str, str]] | None = None, **spec) -> dict:
    body = {
        "version": "1.0.0",
        "installModes": [{"type": "AllNamespaces", "supported": True}],
        "customresourcedefinitions": {
            "owned": [
                {"name": n, "version": v, "kind": n.split(".")[0].title()}
                for n, v in (owned or [])
            ],
        },
    }
    body.update(spec)
    return {
        "apiVersion": "operators.coreos.com/v1alpha1",
        "kind": "ClusterServiceVersion",
        "metadata": {"name": name},
        "spec": body,
    }


def _crd(name: str, *versions: str, storage: str | None = None) -> dict:
    storage = storage or (versions[0] if versions else None)
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": name},
        "spec": {
            "group": name.split(".", 1)[1],
            "names": {"kind": "Widget", "plural": name.split(".")[0]},
            "versions": [
                {"name": v, "served": True, "storage": v == storage} for v in versions
            ],
        },
    }


def _kind(kind: str, name: str = "x", api_version: str = "v1") -> dict:
    return {"apiVersion": api_version, "kind": kind, "metadata": {"name": name}}


def _msgs(errors) -> list[str]:
    return [str(e) for e in errors]


W = "widgets.example.com"
G = "gadgets.example.com"


# ═══════════════════════════════════════════════════════════════════
#  Valid
# ═══════════════════════════════════════════════════════════════════


class TestValidContent:
    def test_matching_csv_and_crds(self):
        objs = [_obj(_csv(owned=[(W, "v1"), (G, "v1")])), _obj(_crd(W, "v1")), _obj(_crd(G, "v1"))]
        assert validate_content(objs) == []

    def test_csv_only(self):
        assert validate_content([_obj(_csv())]) == []

    def test_supported_rbac_kinds(self):
        objs = [_obj(_csv())] + [
            _obj(_kind(k, api_version="rbac.authorization.k8s.io/v1"))
            for k in ("Role", "RoleBinding", "ClusterRole", "ClusterRoleBinding")
        ]
        assert validate_content(objs) == []

    def test_multi_version_crd_all_owned(self):
        objs = [
            _obj(_csv(owned=[(W, "v1alpha1"), (W, "v1")])),
            _obj(_crd(W, "v1alpha1", "v1", storage="v1")),
        ]
        assert validate_content(objs) == []

    def test_legacy_single_version_crd(self):
        crd = {
            "apiVersion": "apiextensions.k8s.io/v1beta1",
            "kind": "CustomResourceDefinition",
            "metadata": {"name": W},
            "spec": {"group": "example.com", "version": "v1beta2", "names": {"kind": "Widget"}},
        }
        objs = [_obj(_csv(owned=[(W, "v1beta2")])), _obj(crd)]
        assert validate_content(objs) == []


# ═══════════════════════════════════════════════════════════════════
#  CSV
# ═══════════════════════════════════════════════════════════════════


class TestCSV:
    def test_no_csv(self):
        errors = validate_content([_obj(_kind("ServiceAccount"))])
        assert _msgs(errors) == ["no ClusterServiceVersion found in bundle"]
        assert isinstance(errors[0], ClusterServiceVersionError)

    def test_two_csvs(self):
        errors = validate_content([_obj(_csv("a.v1")), _obj(_csv("b.v1"))])
        assert len(errors) == 1
        assert "found 2 ClusterServiceVersions" in str(errors[0])

    def test_two_csvs_still_checks_kinds(self):
        objs = [_obj(_csv("a.v1")), _obj(_csv("b.v1")), _obj(_kind("Pod"))]
        assert _msgs(validate_content(objs))[1] == "Pod is not supported type for registryV1 bundle"

    @pytest.mark.parametrize("modes", [None, []])
    def test_install_modes_not_found(self, modes):
        csv = _csv(installModes=modes)
        assert _msgs(validate_content([_obj(csv)])) == ["install modes not found"]

    def test_install_modes_absent(self):
        csv = _csv()
        del csv["spec"]["installModes"]
        assert _msgs(validate_content([_obj(csv)])) == ["install modes not found"]

    def test_missing_name(self):
        csv = _csv()
        del csv["metadata"]["name"]
        assert "csv name is empty" in _msgs(validate_content([_obj(csv)]))

    def test_invalid_version(self):
        errors = validate_content([_obj(_csv(version="one"))])
        assert _msgs(errors) == ["csv demo.v1.0.0 has invalid semver version 'one'"]

    def test_owned_reference_missing_fields(self):
        csv = _csv()
        csv["spec"]["customresourcedefinitions"]["owned"] = [{"kind": "Widget"}]
        assert _msgs(validate_content([_obj(csv)])) == [
            "owned CRD at index 0 is missing name",
            "owned CRD at index 0 is missing version",
        ]

    def test_required_reference_missing_version(self):
        csv = _csv()
        csv["spec"]["customresourcedefinitions"]["required"] = [{"name": G}]
        assert _msgs(validate_content([_obj(csv)])) == [f"required CRD {G} is missing version"]

    def test_required_crds_are_not_cross_checked(self):
        csv = _csv()
        csv["spec"]["customresourcedefinitions"]["required"] = [
            {"name": G, "version": "v1", "kind": "Gadget"},
        ]
        assert validate_content([_obj(csv)]) == []

    def test_csv_with_bad_metadata_still_counts(self):
        csv = _csv(owned=[(W, "v1")])
        csv["metadata"]["namespace"] = 5
        objs = [ManifestObject.from_raw(csv, source="csv.yaml"), _obj(_crd(W, "v1"))]
        assert validate_content(objs) == []

    def test_type_mismatch_is_decode_error(self):
        csv = _csv()
        csv["spec"]["installModes"] = "AllNamespaces"
        errors = validate_content([_obj(csv)])
        assert len(errors) == 1
        assert isinstance(errors[0], ManifestDecodeError)
        assert "installModes" in str(errors[0])


# ═══════════════════════════════════════════════════════════════════
#  CRDs
# ═══════════════════════════════════════════════════════════════════


class TestCRDs:
    def test_duplicate_version(self):
        objs = [_obj(_csv(owned=[(W, "v1")])), _obj(_crd(W, "v1", "v1"))]
        errors = validate_content(objs)
        assert _msgs(errors) == [f"{W} must contain unique version name v1"]
        assert isinstance(errors[0], CustomResourceDefinitionError)

    def test_one_error_per_duplicated_name(self):
        objs = [
            _obj(_csv(owned=[(W, "v1"), (W, "v2")])),
            _obj(_crd(W, "v1", "v2", "v1", "v2", "v1")),
        ]
        assert _msgs(validate_content(objs)) == [
            f"{W} must contain unique version name v1",
            f"{W} must contain unique version name v2",
        ]

    def test_duplicates_independent_of_other_crds(self):
        objs = [
            _obj(_csv(owned=[(W, "v1"), (G, "v1")])),
            _obj(_crd(W, "v1", "v1")),
            _obj(_crd(G, "v1")),
        ]
        assert _msgs(validate_content(objs)) == [f"{W} must contain unique version name v1"]

    def test_no_storage_version(self):
        crd = _crd(W, "v1")
        crd["spec"]["versions"][0]["storage"] = False
        objs = [_obj(_csv(owned=[(W, "v1")])), _obj(crd)]
        assert _msgs(validate_content(objs)) == [f"{W} must have exactly one storage version"]

    def test_two_storage_versions(self):
        crd = _crd(W, "v1", "v2")
        for v in crd["spec"]["versions"]:
            v["storage"] = True
        objs = [_obj(_csv(owned=[(W, "v1"), (W, "v2")])), _obj(crd)]
        assert _msgs(validate_content(objs)) == [f"{W} must have exactly one storage version"]


class TestOwnedCRDs:
    def test_owned_not_found(self):
        objs = [_obj(_csv(owned=[(W, "v1")]))]
        assert _msgs(validate_content(objs)) == [f"owned CRD {W}/v1 not found in bundle"]

    def test_crd_with_bad_field_is_one_error(self):
        crd = _crd(W, "v1")
        crd["spec"]["group"] = ["example.com"]
        errors = validate_content([_obj(_csv(owned=[(W, "v1")])), _obj(crd)])
        assert len(errors) == 1
        assert isinstance(errors[0], ManifestDecodeError)
        assert "spec.group" in str(errors[0])

    def test_crd_with_bad_metadata_still_present(self):
        crd = _crd(W, "v1beta1", "v1", storage="v1")
        crd["metadata"]["labels"] = "oops"
        objs = [_obj(_csv(owned=[(W, "v1beta1"), (W, "v1")])), ManifestObject.from_raw(crd)]
        assert validate_content(objs) == []

    def test_crd_null_names(self):
        crd = _crd(W, "v1")
        crd["spec"]["names"] = None
        assert validate_content([_obj(_csv(owned=[(W, "v1")])), _obj(crd)]) == []

    def test_present_not_defined(self):
        objs = [_obj(_csv()), _obj(_crd(W, "v1"))]
        assert _msgs(validate_content(objs)) == [
            f'CRD {W}/v1 is present in bundle "demo.v1.0.0" but not defined in CSV',
        ]

    def test_symmetric_difference_count(self):
        objs = [
            _obj(_csv(owned=[(W, "v1"), (G, "v1"), ("things.example.com", "v1")])),
            _obj(_crd(W, "v1")),
            _obj(_crd("bolts.example.com", "v1")),
            _obj(_crd("nuts.example.com", "v1")),
        ]
        errors = validate_content(objs)
        assert len(errors) == 4
        assert _msgs(errors) == [
            f"owned CRD {G}/v1 not found in bundle",
            "owned CRD things.example.com/v1 not found in bundle",
            'CRD bolts.example.com/v1 is present in bundle "demo.v1.0.0" but not defined in CSV',
            'CRD nuts.example.com/v1 is present in bundle "demo.v1.0.0" but not defined in CSV',
        ]

    def test_version_mismatch_counts_both_ways(self):
        objs = [_obj(_csv(owned=[(W, "v1")])), _obj(_crd(W, "v2"))]
        assert _msgs(validate_content(objs)) == [
            f"owned CRD {W}/v1 not found in bundle",
            f'CRD {W}/v2 is present in bundle "demo.v1.0.0" but not defined in CSV',
        ]

    def test_duplicate_owned_reference(self):
        objs = [_obj(_csv(owned=[(W, "v1"), (W, "v1")])), _obj(_crd(W, "v1"))]
        assert _msgs(validate_content(objs)) == [
            f"duplicate owned CRD {W}/v1 in CSV 'demo.v1.0.0'",
        ]

    def test_no_cross_check_without_csv(self):
        errors = validate_content([_obj(_crd(W, "v1"))])
        assert _msgs(errors) == ["no ClusterServiceVersion found in bundle"]


# ═══════════════════════════════════════════════════════════════════
#  Kinds
# ═══════════════════════════════════════════════════════════════════


class TestKinds:
    def test_unsupported_kind(self):
        errors = validate_content([_obj(_csv()), _obj(_kind("ResourceQuota"), source="q.yaml")])
        assert _msgs(errors) == ["ResourceQuota is not supported type for registryV1 bundle"]
        assert isinstance(errors[0], UnsupportedKindError)
        assert errors[0].path == "q.yaml"

    def test_one_error_per_object(self):
        objs = [_obj(_csv()), _obj(_kind("Deployment", "a")), _obj(_kind("Deployment", "b"))]
        assert len(validate_content(objs)) == 2

    def test_unknown_media_type_allows_nothing(self):
        errors = validate_content([_obj(_csv())], media_type="plain+v0")
        assert _msgs(errors) == ["ClusterServiceVersion is not supported type for plain+v0 bundle"]


class TestIsolation:
    def test_input_not_mutated(self):
        doc = _csv(owned=[(W, "v1")])
        snapshot = copy.deepcopy(doc)
        validate_content([_obj(doc)])
        assert doc == snapshot

    def test_repeatable(self):
        objs = [_obj(_csv(owned=[(W, "v1")])), _obj(_kind("Pod"))]
        assert _msgs(validate_content(objs)) == _msgs(validate_content(objs))
