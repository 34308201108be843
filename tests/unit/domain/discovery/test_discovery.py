"""End-to-end discovery over rendered YAML: parse, recognize, classify, collect."""

import pytest

from secure_import.domain.discovery.model.reference import Candidate, CandidateOrigin
from secure_import.domain.discovery.service.discovery import ImageDiscovery
from secure_import.domain.discovery.service.reference_set import ReferenceSet
from secure_import.domain.shared.error import DiscoveryError
from secure_import.infrastructure.yaml.parser import parse_documents


def discover(text: str) -> list[str]:
    return [str(ref) for ref in ImageDiscovery().discover(parse_documents(text))]


class TestImageDiscovery:
    def test_simple_mapping(self):
        text = """
image:
  repository: my-repo/my-image
  tag: 1.2.3
"""
        assert discover(text) == ["my-repo/my-image:1.2.3"]

    def test_mapping_and_sidecar(self):
        text = """
spec:
  containers:
    - name: app
      image:
        repository: my-repo/app
        tag: v1
    - name: sidecar
      image: istio/proxyv2:1.20.0
"""
        assert discover(text) == ["istio/proxyv2:1.20.0", "my-repo/app:v1"]

    def test_no_images(self):
        assert discover("foo: bar\nreplicas: 3\n") == []

    def test_invalid_image_string(self):
        assert discover("image: invalid-image\n") == []

    def test_sequence(self):
        assert discover("images:\n  - image1:v1\n  - image2:v2\n") == ["image1:v1", "image2:v2"]

    def test_duplicates_collapse(self):
        text = """
a:
  repository: my-repo/my-image
  tag: 1.2.3
b:
  image: my-repo/my-image:1.2.3
---
c: my-repo/my-image:1.2.3
"""
        assert discover(text) == ["my-repo/my-image:1.2.3"]

    def test_nested_structures(self):
        text = """
services:
  frontend:
    image: frontend:v1.0.0
  backend:
    deployment:
      containers:
        - image: backend:v2.0.0
  database:
    image:
      repository: postgres
      tag: "13"
"""
        assert discover(text) == ["backend:v2.0.0", "frontend:v1.0.0", "postgres:13"]

    def test_registry_prefix_kept(self):
        assert discover("image: registry.example.com/team/app:2.0\n") == ["registry.example.com/team/app:2.0"]

    def test_localhost_registry(self):
        assert discover("image: localhost:5000/my-image:dev\n") == ["localhost:5000/my-image:dev"]

    def test_missing_tag(self):
        assert discover("image:\n  repository: my-repo/app\n") == []

    def test_empty_values(self):
        text = """
a:
  repository: ""
  tag: v1
b:
  repository: my-repo/app
  tag: ""
c:
  repository: my-repo/valid
  tag: v1
"""
        assert discover(text) == ["my-repo/valid:v1"]

    def test_semver_tag(self):
        assert discover("image: my-repo/app:v1.2.3-alpha+build.123\n") == ["my-repo/app:v1.2.3-alpha+build.123"]

    def test_mixed_valid_and_invalid(self):
        text = """
images:
  - my-repo/valid:v1
  - invalid-image
  - registry.io/app:latest
  - release-name-argocd-repo-server:8081
  - crossplane:aggregate-to-admin
"""
        assert discover(text) == ["my-repo/valid:v1", "registry.io/app:latest"]

    def test_whitespace_trimmed(self):
        assert discover('image: "  my-repo/app:v1  "\n') == ["my-repo/app:v1"]

    def test_multiple_documents(self):
        assert discover("image: app-one/api:v1\n---\nimage: app-two/web:v2\n") == [
            "app-one/api:v1",
            "app-two/web:v2",
        ]

    def test_container_args(self):
        text = """
args:
  - --configmap-reload-image=quay.io/prometheus-operator/configmap-reload:v0.12.0
  - --log-level=info
"""
        assert discover(text) == ["quay.io/prometheus-operator/configmap-reload:v0.12.0"]

    def test_invalid_yaml(self):
        with pytest.raises(DiscoveryError):
            discover("invalid: [")

    def test_sibling_order_does_not_matter(self):
        one = "a: org/x:1\nb: org/y:2\n"
        two = "b: org/y:2\na: org/x:1\n"
        assert discover(one) == discover(two)


class TestReferenceSet:
    def test_deduplicates_and_sorts(self):
        candidates = [
            Candidate(text="b/app:1", origin=CandidateOrigin.SCALAR),
            Candidate(text="a/app:1", origin=CandidateOrigin.STRUCTURAL),
            Candidate(text="b/app:1", origin=CandidateOrigin.EMBEDDED),
        ]

        refs = ReferenceSet(candidates)

        assert len(refs) == 2
        assert refs.texts() == ["a/app:1", "b/app:1"]
        assert [str(r) for r in refs.references()] == ["a/app:1", "b/app:1"]
