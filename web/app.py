"""Flask web interface for importing documentation builds.

Only administers build imports; aggregated documentation is served by a
separate read path.
"""

import logging

from flask import Flask, jsonify, request

from docu_aggregator.config import AggregatorConfig, default_data_directory
from docu_aggregator.domain.errors import MarshalError, ResourceNotFoundError
from docu_aggregator.domain.models import BuildIdentifier, BuildImportSummary
from docu_aggregator.importer import BuildImporter

logger = logging.getLogger(__name__)


def _summary_to_json(summary: BuildImportSummary) -> dict:
    build = summary.build_description
    return {
        'branch': summary.identifier.branch_name,
        'build': summary.identifier.build_name,
        'revision': build.revision if build else None,
        'date': build.date if build else None,
        'status': summary.status.value,
        'status_message': summary.status_message,
        'statistics': {
            'use_cases': summary.statistics.number_of_use_cases,
            'successful_scenarios': summary.statistics.number_of_successful_scenarios,
            'failed_scenarios': summary.statistics.number_of_failed_scenarios,
        },
    }


def create_app(config: AggregatorConfig | None = None) -> Flask:
    app = Flask(__name__)
    config = config or AggregatorConfig(documentation_data_directory=default_data_directory())
    importer = BuildImporter(config)

    @app.errorhandler(MarshalError)
    def handle_marshal_error(e):
        logger.error("Could not read or write documentation files: %s", e)
        return jsonify({'error': str(e)}), 500

    @app.route('/api/builds')
    def list_builds():
        """List all builds with their import status."""
        return jsonify([_summary_to_json(s) for s in importer.update_build_summaries()])

    @app.route('/api/builds/<branch>/<build>/import', methods=['POST'])
    def import_build(branch: str, build: str):
        """Aggregate a build; ``?force=true`` recalculates current data too."""
        identifier = BuildIdentifier(branch, build)
        force = request.args.get('force', 'false').lower() == 'true'
        try:
            summary = importer.import_build(identifier, force=force)
        except ResourceNotFoundError:
            return jsonify({'error': f'Build {identifier} not found'}), 404
        return jsonify(_summary_to_json(summary))

    @app.route('/api/builds/<branch>/<build>/aggregated', methods=['DELETE'])
    def remove_aggregated(branch: str, build: str):
        """Remove the aggregated data of a build."""
        identifier = BuildIdentifier(branch, build)
        if not importer.build_exists(identifier):
            return jsonify({'error': f'Build {identifier} not found'}), 404
        return jsonify(_summary_to_json(importer.remove_build(identifier)))

    @app.route('/api/builds/import-all', methods=['POST'])
    def import_all():
        """Aggregate all unprocessed or outdated builds."""
        return jsonify([_summary_to_json(s) for s in importer.import_all()])

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True, port=5002)
